# Minimal VDA-FS reader for curve work.
# - Only columns 1..72 carry data (73..80 are sequence numbers)
# - Lines starting with "$$" (after optional spaces) are comments
# - A statement starts at "NAME = WORD" and runs until the next one
# - Parsed as "NAME = COMMAND / params"; numbers become int/float,
#   references such as CV57 stay strings
# - HEADER / N swallows the next N raw records; END stops parsing

import logging
import re

logger = logging.getLogger(__name__)

DATA_COLUMNS = 72

_stmt_start = re.compile(r'^\s*[A-Z][A-Z0-9]{0,7}\s*=\s*[A-Z]+')
_stmt_parse = re.compile(r'^\s*([A-Z][A-Z0-9]{0,7})\s*=\s*([A-Z]+)\s*(?:/\s*(.*))?\s*$')
_int_token = re.compile(r'^[\+\-]?\d+$')
_ref_token = re.compile(r'^[A-Z]{2}\d+$')


def _is_comment(s):
    return s.lstrip().startswith('$$')


def _read_records(path):
    with open(path, 'r', encoding='latin-1') as f:
        return [(i, raw.rstrip('\r\n')) for i, raw in enumerate(f, start=1)]


def _statements(records):
    """Yield (first_line, last_line, text) for each coalesced statement."""
    parts = []
    first = last = None
    for lineno, raw in records:
        data = raw[:DATA_COLUMNS]
        stripped = data.strip()
        if stripped.upper() == 'END':
            break
        if not stripped or _is_comment(data):
            continue
        if _stmt_start.match(data):
            if parts:
                yield first, last, ''.join(parts)
            parts = [data]
            first = last = lineno
        elif parts:
            parts.append(data)
            last = lineno
        else:
            logger.debug("line %d: text outside of a statement skipped", lineno)
    if parts:
        yield first, last, ''.join(parts)


def to_number(tok):
    """Convert a parameter token to int or float; leave anything else as text."""
    t = tok.strip()
    if _int_token.match(t):
        return int(t)
    try:
        return float(t)
    except ValueError:
        return t


def split_params(s):
    if not s or not s.strip():
        return []
    out = []
    for p in s.split(','):
        p = p.strip()
        if not p:
            continue
        out.append(p if _ref_token.match(p) else to_number(p))
    return out


def read_vdafs(path):
    """
    Parse a VDA-FS file into
      {'path': path, 'header': {...} or None, 'entities': [ {...}, ... ]}
    where each entity is {'name', 'command', 'params', 'raw', 'lineno_start', 'lineno_end'}.
    """
    records = _read_records(path)
    text_at = dict(records)

    header = None
    entities = []
    for ln0, ln1, text in _statements(records):
        m = _stmt_parse.match(text)
        if not m:
            logger.debug("lines %d-%d: unparsable statement skipped", ln0, ln1)
            continue
        name, word, rest = m.group(1), m.group(2), m.group(3)

        if word == 'HEADER':
            m_count = re.match(r'\s*([\+\-]?\d+)', rest or '')
            n = max(0, int(m_count.group(1))) if m_count else 0
            header = {
                'name': name,
                'n_lines': n,
                'lines': [text_at.get(ln0 + 1 + k, '') for k in range(n)],
                'lineno_start': ln0,
                'lineno_end': ln0 + n,
            }
            continue
        if word == 'END':
            break

        entities.append({
            'name': name,
            'command': word,
            'params': split_params(rest),
            'raw': text,
            'lineno_start': ln0,
            'lineno_end': ln1,
        })

    logger.debug("%s: %d entities read", path, len(entities))
    return {'path': path, 'header': header, 'entities': entities}
