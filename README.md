# dnflock

`dnflock` works with RPM repository metadata and turns it into things a build
system can pin: reduced package sets, dependency-sorted lock files, tar header
ordering and shared-library closures. It is a library; it has no command-line
entry point.

## Modules

- **`dnflock.api`** – data classes for `primary.xml`, `repomd.xml` and
  metalink documents. `parse_repository`, `parse_repomd` and `parse_metalink`
  read them from bytes or text; `write_repository` serialises a `Repository`
  back to indented XML bytes. `Checksum.integrity()` turns a package checksum
  into a subresource-integrity string (`sha1-…`, `sha256-…` or `sha512-…`) and
  raises `ValueError` for other checksum types. `Repomd.file(type)` and
  `Metalink.repomd()` pick out sections; `Data.sha256()` and
  `MetalinkFile.sha256()` raise `ValueError` when no such sum is present.
- **`dnflock.config`** – `Repository` and `Repositories` describe remote
  repositories (build them from decoded JSON or YAML with
  `repositories_from_dict`). `RPM` and `Config` are the lock file contents;
  `Config.to_json()` produces tab-indented JSON, leaving out empty
  `cli-arguments`, `targets` and `ignored` fields.
- **`dnflock.loader`** – `RepoLoader.load()` reads packages of the wanted
  architectures from `primary.xml` files and from an optional `RepoCache`
  (any object with `current_primaries(repos, arch)`), drops rich `(…)`
  requirements, and returns a `PackageInfo` indexing every provision and file
  to its packages. `fix_packages` patches known metadata quirks.
- **`dnflock.reducer`** – `new_repo_reducer(repos, repo_files, base_system,
  arch, cache_helper)` builds a `RepoReducer` for `noarch` and `arch`
  packages, with `base_system` (if not empty) as an implicit requirement.
  After `load()`, `resolve(packages, ignore_missing)` returns the names of the
  matched packages and every package that could take part in a solution. It
  prefers the repository with the lower `priority` for identical packages,
  does not pull in other versions of requested package names, and trims
  provisions nobody in the result requires. A missing package raises
  `LookupError` unless `ignore_missing` is true.
- **`dnflock.lockconfig`** – `to_config(install, force_ignored, targets,
  cmdline)` turns an install set and a list of force-ignored packages into a
  `Config` whose RPMs are sorted by name and list their direct dependencies,
  sorted, without ignored packages and without self-references. A requirement
  with no provider raises `LookupError`.
- **`dnflock.lockfile`** – `write_lock_file(config, path)` writes the JSON;
  `add_config_rpms(config, pkgs, arch)` appends entries with one URL per
  repository mirror; `join_url`, `sanitize` and `parse_macro` are the helpers
  behind it.
- **`dnflock.template`** – `render(writer, installed, force_ignored)` writes a
  column-aligned transaction table with sizes formatted by
  `to_readable_quantity` (decimal K/M/G).
- **`dnflock.order`** – `new_directory_tree()` returns a `Node`; `add`
  directory and symlink headers (`tarfile.TarInfo` or anything with `name` and
  `type`) and `traverse` returns them breadth first, so parents always come
  before their children. A symlink replaces a directory at the same path, never
  the other way round.
- **`dnflock.ldd`** – `resolve(objects, library_path)` follows the `DT_NEEDED`
  imports of ELF objects through a list of library directories, including
  symlink chains; `imported_libraries` and `follow_symlinks` are available on
  their own. `dnflock.filter.filter_files` keeps only sources, headers, objects
  and (versioned) libraries.

## Example

```python
import sys

from dnflock.config import Config, Repositories, Repository
from dnflock.lockconfig import to_config
from dnflock.lockfile import write_lock_file
from dnflock.reducer import new_repo_reducer
from dnflock.template import render

reducer = new_repo_reducer(
    Repositories(), ["primary.xml"], "fedora-release-container", "x86_64", None
)
reducer.load()
matched, involved = reducer.resolve(["bash"], False)

mirror = Repository(name="fedora", mirrors=["https://mirror.example.com/fedora/"])
for pkg in involved:
    pkg.repository = mirror

# `involved` holds every candidate; choose the packages to install from it.
install = involved
config = to_config(install, [], ["bash"], [])
write_lock_file(config, "lock.json")
render(sys.stdout, install, [])
```

Errors, such as a requested package that does not exist or a requirement with
no provider, are raised as exceptions.

## What it does not do

- It has no command-line tool; everything is called from Python.
- It does not download repository metadata, RPMs or signing keys. Cached
  metadata comes in through a `RepoCache` object you provide.
- It does not choose a single consistent install set: `RepoReducer.resolve`
  returns all candidates, and picking versions among them is left to the
  caller.
- It does not unpack RPMs or write tar archives; `dnflock.order` only orders
  headers you give it.
- It does not edit build or workspace files.