#
# Copyright (c) 2024-2025 LateGenXer
#
# SPDX-License-Identifier: AGPL-3.0-or-later
#


import html
import sys
import textwrap
import unicodedata

from typing import Sequence, Any, Callable, TextIO
from abc import ABC, abstractmethod


def display_width(s:str) -> int:
    """Number of terminal columns taken by s, counting CJK wide characters as two."""
    width = 0
    for c in s:
        if unicodedata.combining(c):
            continue
        width += 2 if unicodedata.east_asian_width(c) in ('W', 'F') else 1
    return width


def _ljust(s:str, width:int) -> str:
    return s + ' ' * (width - display_width(s))


def _rjust(s:str, width:int) -> str:
    return ' ' * (width - display_width(s)) + s


def _center(s:str, width:int) -> str:
    padding = width - display_width(s)
    left = padding // 2
    return ' ' * left + s + ' ' * (padding - left)


class Report(ABC):

    def start(self, title:str) -> None:
        pass

    @abstractmethod
    def write_heading(self, heading:str, level:int=1) -> None:  # pragma: no cover
        raise NotImplementedError

    @abstractmethod
    def write_paragraph(self, paragraph:str) -> None:  # pragma: no cover
        raise NotImplementedError

    @abstractmethod
    def write_table(self, rows:list[list], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:Sequence[Any]|None=None, indent:str='') -> None:  # pragma: no cover
        raise NotImplementedError

    @staticmethod
    def format(field:Any) -> str:
        if field is None or field != field:
            return ''
        else:
            return str(field)

    def end(self) -> None:
        pass


class TextReport(Report):

    def __init__(self, stream:TextIO=sys.stdout):
        if sys.platform == 'win32' and not stream.isatty():
            stream.reconfigure(encoding='utf-8-sig')  # type: ignore[attr-defined]
        self.stream = stream
        self.heading_sep = ''

    def write_heading(self, heading:str, level:int=1) -> None:
        if level <= 1:
            heading = heading.upper()
        if sys.platform != 'win32' and self.stream.isatty():
            # Ansi escape
            _csi = '\33['
            normal = _csi + '0m'
            bold = _csi + '1m'
            heading = bold + heading + normal
        self.stream.write(self.heading_sep + heading + '\n\n')
        self.heading_sep = ''

    def write_paragraph(self, paragraph:str) -> None:
        paragraph = '\n'.join(textwrap.wrap(paragraph, width=100))
        self.stream.write(paragraph + '\n\n')
        self.heading_sep = '\n'

    def write_table(self, rows:list[list], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:Sequence[Any]|None=None, indent:str='') -> None:
        stream = self.stream

        ncols = len(rows[0]) if rows else len(header or ())
        assert all(len(row) == ncols for row in rows)

        m:dict[str, Callable[[str, int], str]] = {
            'c': _center,
            'l': _ljust,
            'r': _rjust,
        }
        if just is None:
            justs = [_center]*ncols
        else:
            assert len(just) == ncols
            justs = [m[j] for j in just]

        lines = [[self.format(cell) for cell in row] for row in rows]
        header_ = None if header is None else [self.format(cell) for cell in header]
        footer_ = None if footer is None else [self.format(cell) for cell in footer]
        for extra in (header_, footer_):
            assert extra is None or len(extra) == ncols

        widths = [0]*ncols
        for line in lines + [extra for extra in (header_, footer_) if extra is not None]:
            for c, cell in enumerate(line):
                widths[c] = max(widths[c], display_width(cell))

        sep = '  '

        def render(line:list[str]) -> str:
            return indent + sep.join(j(cell, width) for cell, j, width in zip(line, justs, widths)).rstrip() + '\n'

        rule = indent + '─' * (sum(widths) + len(sep)*(ncols - 1)) + '\n'

        if header_ is not None:
            stream.write(render(header_))
            stream.write(rule)
        for line in lines:
            stream.write(render(line))
        if footer_ is not None:
            stream.write(rule)
            stream.write(render(footer_))

        stream.write('\n')

        self.heading_sep = '\n'


class HtmlReport(Report):

    _css = '''
body {
  font-family: "Noto Sans JP", "Noto Sans Mono", sans-serif;
  font-optical-sizing: auto;
  font-weight: 400;
  font-style: normal;
  font-size: 0.875rem; /* 14px */
  background-color: white;
}

.fixed-right {
  position: fixed;
  top: 0;
  right: 0;
}

h1, h2, h3, h4 {
  font-size: 100%;
  font-weight: bold;
  font-style: normal;
  margin-top: 2em;
  margin-bottom: 1em;
}

h1 {
  text-align: center;
}

.text-center { text-align: center; }
.text-right { text-align: right; font-variant-numeric: tabular-nums; }
.text-left { text-align: left; }

.visible-print-block { display: none; }
@media print {
  body { font-size: 10px; }
  .hidden-print { display: none !important; }
  .visible-print-block { display: block; }
}

.table {
  margin: 1em auto 1em 2ch;
  border-spacing: 0;
}

thead tr th {
  border-bottom: 1.5px solid;
  border-collapse: collapse;
}

tfoot tr th {
  border-top: 1.5px solid;
  border-collapse: collapse;
}

th, td {
  padding: 0.25em 1ch 0.25em 1ch;
}
'''

    def __init__(self, stream:TextIO):
        self.stream = stream

    def start(self, title:str) -> None:
        title = html.escape(title)
        # https://fonts.google.com/noto/specimen/Noto+Sans+JP
        self.stream.write(f'''<!doctype html>
<html lang="ja">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Noto+Sans+JP&amp;display=swap" rel="stylesheet">
<style>{self._css}</style>
</head>
<body>
<div class="fixed-right hidden-print">
<button onclick="window.print()">Print</button>
</div>
<div class="container-fluid">
<h1>{title}</h1>
''')

    def write_heading(self, heading:str, level:int=1) -> None:
        level += 1
        heading = html.escape(heading)
        self.stream.write(f'\n<h{level}>{heading}</h{level}>\n\n')

    def write_paragraph(self, paragraph:str) -> None:
        paragraph = html.escape(paragraph)
        self.stream.write(f'<p>{paragraph}</p>\n\n')

    @staticmethod
    def format_and_escape(field:Any) -> str:
        field = Report.format(field)
        field = html.escape(field)
        return field

    def write_table(self, rows:list[list], header:Sequence[Any]|None=None, footer:Sequence[Any]|None=None, just:Sequence[Any]|None=None, indent:str='') -> None:
        fmt = self.format_and_escape

        m = {
            'c': 'text-center',
            'l': 'text-left',
            'r': 'text-right',
        }
        ncols = len(rows[0]) if rows else len(header or ())
        classes = ['text-center'] * ncols if just is None else [m[j] for j in just]

        self.stream.write('<table class="table">\n')
        if header:
            self.stream.write('<thead><tr>' + ''.join([f'<th class="{c}">{fmt(field)}</th>' for field, c in zip(header, classes)]) + '</tr></thead>\n')
        self.stream.write('<tbody>\n')
        for row in rows:
            self.stream.write('<tr>' + ''.join([f'<td class="{c}">{fmt(field)}</td>' for field, c in zip(row, classes)]) + '</tr>\n')
        self.stream.write('</tbody>\n')
        if footer:
            self.stream.write('<tfoot><tr>' + ''.join([f'<th class="{c}">{fmt(field)}</th>' for field, c in zip(footer, classes)]) + '</tr></tfoot>\n')
        self.stream.write('</table>\n')

    def end(self) -> None:
        self.stream.write('\n')
        self.stream.write('</div>\n')
        self.stream.write('</body>\n')
        self.stream.write('</html>\n')
