"""
Splitting of one task file record into comma separated fields.

A field is either bare text without double quotes or a double-quoted text in
which a literal double quote is written twice. The quoted flag is kept so the
codec can tell the text "null" from a null value.
"""
from typing import List, NamedTuple

from kanban.recovery import CSVParsingError

class Token(NamedTuple):
    text: str
    quoted: bool
    position: int  # 1-based column of the field's first character

def split_line(line: str) -> List[Token]:
    """Split a record line into tokens, raising CSVParsingError on malformed quoting."""
    if line is None:
        raise CSVParsingError("cannot parse null string")

    tokens = []
    length = len(line)
    index = 0
    while True:
        start = index
        if index < length and line[index] == '"':
            parts = []
            index += 1
            while True:
                closing = line.find('"', index)
                if closing == -1:
                    raise CSVParsingError("double quote expected", length + 1)
                parts.append(line[index:closing])
                if line.startswith('""', closing):
                    parts.append('"')
                    index = closing + 2
                    continue
                index = closing + 1
                break
            if index < length and line[index] != ',':
                raise CSVParsingError("comma expected", index + 1)
            tokens.append(Token(''.join(parts), True, start + 1))
        else:
            comma = line.find(',', index)
            end = length if comma == -1 else comma
            quote = line.find('"', index, end)
            if quote != -1:
                raise CSVParsingError("unexpected double quote", quote + 1)
            tokens.append(Token(line[index:end], False, start + 1))
            index = end

        if index >= length:
            return tokens
        index += 1  # skip the comma
