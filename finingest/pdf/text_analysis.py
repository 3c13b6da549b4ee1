import re

_NUMBER_RE = re.compile(r"[\d,]+\.?\d*")
_WIDE_GAP_RE = re.compile(r"\s{2,}")

# share of lines that must look delimited / numeric
_DELIMITED_LINE_SHARE = 0.3
_NUMERIC_LINE_SHARE = 0.2


def looks_tabular(text: str) -> bool:
    """Heuristic: does extracted PDF text look like it holds tables?

    Financial reports flatten into lines with repeated delimiters or several
    numbers per line.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    if len(lines) < 3:
        return False

    tab_lines = sum(1 for line in lines if "\t" in line)
    comma_lines = sum(1 for line in lines if line.count(",") > 2)
    gap_lines = sum(1 for line in lines if len(_WIDE_GAP_RE.findall(line)) > 2)
    threshold = len(lines) * _DELIMITED_LINE_SHARE
    if max(tab_lines, comma_lines, gap_lines) > threshold:
        return True

    numeric_lines = sum(1 for line in lines if len(_NUMBER_RE.findall(line)) >= 3)
    return numeric_lines > len(lines) * _NUMERIC_LINE_SHARE
