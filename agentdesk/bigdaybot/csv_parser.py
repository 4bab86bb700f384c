"""
CSV tokenizer for contact uploads.

Agents export contact lists from many CRMs and spreadsheets, so the parser
is lenient: blank lines are dropped, header names are lower-cased and
trimmed, and short rows simply omit their missing trailing columns.
"""

import re
from typing import Dict, List

_LINE_SPLIT = re.compile(r'\r?\n')


def parse_csv_line(line: str) -> List[str]:
    """
    Split one CSV line into trimmed field values.

    Handles commas inside double-quoted fields and ``""`` as an escaped
    quote within a quoted field. Empty fields are kept as ``''``.
    """
    result = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]

        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            result.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    result.append(''.join(current).strip())
    return result


def parse_csv(csv_text: str) -> List[Dict[str, str]]:
    """
    Parse CSV text into header-keyed rows.

    Returns an empty list when there is no header plus at least one data
    line. Quoted fields spanning several lines are not supported.
    """
    lines = [line for line in _LINE_SPLIT.split(csv_text or '') if line.strip()]
    if len(lines) < 2:
        return []

    headers = [h.lower().strip() for h in parse_csv_line(lines[0])]

    rows = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        rows.append({
            header: values[index]
            for index, header in enumerate(headers)
            if index < len(values)
        })

    return rows
