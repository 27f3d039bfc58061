"""Turn one raw input line into a terminal-safe, width-bounded byte string.

Rules, applied left to right until the visible-column budget is spent:

- trailing ``\\n`` / ``\\r`` (and any other CR/LF) are dropped,
- ``\\t`` expands to spaces up to the next multiple-of-8 column,
- other C0 controls and DEL become ``.``,
- in ANSI mode a CSI sequence (``ESC [`` params final) or a two-byte escape
  (``ESC`` + one byte) is copied through and costs zero columns; the output
  then ends with an SGR reset so colors cannot bleed past the row,
- in plain mode a bare ``ESC`` is just another control byte.

Every other byte costs one column. Output never carries more visible
columns than the budget.
"""

from __future__ import annotations

TAB_STOP = 8
SGR_RESET = b"\x1b[0m"

_ESC = 0x1B
_CSI_OPEN = 0x5B  # "["
_DEL = 0x7F
_DOT = 0x2E
_SPACE = 0x20


def _csi_end(raw: bytes, start: int) -> int:
    """Return the index after the final byte of the CSI at *start*, or -1.

    *start* points at the ESC. Parameter and intermediate bytes are
    0x20-0x3F, the final byte is 0x40-0x7E; anything else means the
    sequence is malformed.
    """
    i = start + 2
    n = len(raw)
    while i < n:
        ch = raw[i]
        if 0x40 <= ch <= 0x7E:
            return i + 1
        if not 0x20 <= ch <= 0x3F:
            return -1
        i += 1
    return -1


def sanitize_line(raw: bytes, max_cols: int, *, ansi: bool = False) -> bytes:
    """Return the displayable form of *raw* within *max_cols* visible columns."""
    out = bytearray()
    col = 0
    i = 0
    n = len(raw)
    while i < n and col < max_cols:
        ch = raw[i]
        if ch == 0x0A or ch == 0x0D:
            i += 1
            continue
        if ch == 0x09:
            stop = min((col // TAB_STOP + 1) * TAB_STOP, max_cols)
            out.extend(b" " * (stop - col))
            col = stop
            i += 1
            continue
        if ansi and ch == _ESC and i + 1 < n:
            nxt = raw[i + 1]
            if nxt == _CSI_OPEN:
                end = _csi_end(raw, i)
                if end != -1:
                    out.extend(raw[i:end])
                    i = end
                    continue
            elif _SPACE <= nxt < _DEL:
                out.extend(raw[i : i + 2])
                i += 2
                continue
        if ch < _SPACE or ch == _DEL:
            out.append(_DOT)
        else:
            out.append(ch)
        col += 1
        i += 1

    if ansi:
        out.extend(SGR_RESET)
    return bytes(out)
