from functools import cmp_to_key

from columnCodec import index_to_label
from nftErrors import LayoutError

FIXED_HEADERS = ['Count', 'Owner Address', 'Contract Address']
OPENSEA_ASSET_URL = 'https://opensea.io/assets/ethereum/{contract}/{token_id}'

# Row 1 holds the headers
FIRST_DATA_ROW = 2


def parse_token_id(token_id):
    """Parse a token id ("0x..." hex or decimal) into an int. Raises ValueError."""
    text = str(token_id).strip()
    if text[:2].lower() == '0x':
        return int(text[2:], 16)
    return int(text, 10)


def decimal_token_id(token_id):
    try:
        return str(parse_token_id(token_id))
    except ValueError:
        return str(token_id)


def _compare_token_ids(a, b):
    try:
        left, right = parse_token_id(a), parse_token_id(b)
    except ValueError:
        left, right = str(a), str(b)
    return (left > right) - (left < right)


def sort_members(members):
    return sorted(members, key=cmp_to_key(lambda a, b: _compare_token_ids(a.token_id, b.token_id)))


def max_member_count(groups):
    return max((len(group.members) for group in groups.values()), default=0)


def image_column_range(trait_count, max_images):
    """Column labels of the first and last image slot for this run's layout."""
    first = len(FIXED_HEADERS) + trait_count + 1
    last = first + max(max_images, 1) - 1
    try:
        return index_to_label(first), index_to_label(last)
    except ValueError as e:
        raise LayoutError(f"The table needs {last} columns ({trait_count} traits, {max_images} images), "
                          f"more than a sheet can address: {e}") from e


def build_headers(display_traits, max_images):
    return FIXED_HEADERS + list(display_traits) + [f"Image {i}" for i in range(1, max_images + 1)]


def opensea_url(contract, token_id):
    return OPENSEA_ASSET_URL.format(contract=contract, token_id=decimal_token_id(token_id))


# Formula string literal, quotes doubled
def _formula_text(value):
    return '"' + str(value).replace('"', '""') + '"'


def image_cell(contract, slot):
    link = _formula_text(opensea_url(contract, slot.token_id))
    if slot.image_url:
        return f"=HYPERLINK({link}, IMAGE({_formula_text(slot.image_url)}, 1))"
    return f"=HYPERLINK({link}, {_formula_text(decimal_token_id(slot.token_id))})"


def build_records(groups, owner, contract, max_images, image_columns):
    """
    Build one row per group: a COUNTA formula over the row's image slots,
    owner, contract, trait values, then max_images image cells (padded with '').
    """
    start_label, end_label = image_columns
    rows = []
    for offset, group in enumerate(groups.values()):
        row_number = FIRST_DATA_ROW + offset
        row = [f"=COUNTA({start_label}{row_number}:{end_label}{row_number})", owner, contract]
        row.extend(group.key)

        members = sort_members(group.members)
        for i in range(max_images):
            row.append(image_cell(contract, members[i]) if i < len(members) else '')
        rows.append(row)
    return rows
