import string

LETTERS = string.ascii_uppercase

# Highest column reachable with three letters ("ZZZ")
MAX_COLUMN_INDEX = 26 + 26 ** 2 + 26 ** 3


def index_to_label(n):
    """
    Convert a 1-based column index to its letter label (1 -> A, 26 -> Z, 27 -> AA).
    Labels are bijective base-26 numerals, so there is no zero digit.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"Column index must be an integer, got {n!r}")
    if n < 1 or n > MAX_COLUMN_INDEX:
        raise ValueError(f"Column index {n} is outside 1..{MAX_COLUMN_INDEX}")

    label = ''
    while n > 0:
        n, remainder = divmod(n - 1, 26)
        label = LETTERS[remainder] + label
    return label


def label_to_index(label):
    """
    Convert a column label back to its 1-based index (A -> 1, AA -> 27).
    """
    if not label or len(label) > 3:
        raise ValueError(f"Invalid column label: {label!r}")

    index = 0
    for char in label.upper():
        if char not in LETTERS:
            raise ValueError(f"Invalid column label: {label!r}")
        index = index * 26 + LETTERS.index(char) + 1
    return index
