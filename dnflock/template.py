"""Human-readable summary of an install transaction."""

from __future__ import annotations

_TAB_WIDTH = 8
_PADDING = 1


def to_readable_quantity(size):
    """Format a byte count with decimal K/M/G units."""
    if size > 1000 * 1000 * 1000:
        return f"{size / 1000 / 1000 / 1000:.2f} G"
    if size > 1000 * 1000:
        return f"{size / 1000 / 1000:.2f} M"
    if size > 1000:
        return f"{size / 1000:.2f} K"
    return str(size)


def _align(text):
    """Align tab-separated cells into columns padded with tabs."""
    lines = [line.split("\t") for line in text.split("\n")]
    out = []
    widths = []

    def write_lines(start, end):
        for index in range(start, end):
            cells = lines[index]
            for column, cell in enumerate(cells):
                out.append(cell)
                if column < len(widths):
                    cell_width = -(-widths[column] // _TAB_WIDTH) * _TAB_WIDTH
                    gap = cell_width - len(cell)
                    out.append("\t" * -(-gap // _TAB_WIDTH))
            if index + 1 < len(lines):
                out.append("\n")

    def format_block(line0, line1):
        column = len(widths)
        this = line0
        while this < line1:
            if column >= len(lines[this]) - 1:
                this += 1
                continue
            write_lines(line0, this)
            line0 = this
            width = 0
            while this < line1 and column < len(lines[this]) - 1:
                width = max(width, len(lines[this][column]) + _PADDING)
                this += 1
            widths.append(width)
            format_block(line0, this)
            widths.pop()
            line0 = this
        write_lines(line0, line1)

    format_block(0, len(lines))
    return "".join(out)


def _package_line(pkg):
    return (
        f" {pkg.name}\t{pkg.version}\t"
        f"{to_readable_quantity(pkg.size.archive)}\t"
        f"{to_readable_quantity(pkg.size.package)}\n"
    )


def render(writer, installed, force_ignored):
    """Write the package table and transaction summary to a text stream."""
    total_download = sum(pkg.size.package for pkg in installed)
    total_install = sum(pkg.size.archive for pkg in installed)
    parts = ["Package\tVersion\tSize\tDownload Size\n", "Installing:\t\t\t\n"]
    parts.extend(_package_line(pkg) for pkg in installed)
    parts.append("Ignoring:\t\t\t\n")
    parts.extend(_package_line(pkg) for pkg in force_ignored)
    parts.append("\t\t\t\nTransaction Summary:\t\t\t\n")
    parts.append(f"Installing {len(installed)} Packages \t\t\t\n")
    parts.append(f"Total download size: {to_readable_quantity(total_download)}\t\t\t\n")
    parts.append(f"Total install size: {to_readable_quantity(total_install)}\t\t\t\n")
    writer.write(_align("".join(parts)))