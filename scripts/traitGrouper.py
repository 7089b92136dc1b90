import logging
from dataclasses import dataclass, field
from typing import Optional

import pandas as pd


@dataclass(frozen=True)
class TokenSlot:
    token_id: str
    image_url: Optional[str] = None


@dataclass
class TraitGroup:
    key: tuple
    members: list = field(default_factory=list)


def _token_slot(record):
    return TokenSlot(token_id=record.token_id, image_url=record.image_url)


def group_by_traits(records, display_traits):
    """
    Group records by the ordered tuple of their display trait values.
    Trait names match case-insensitively and a missing trait counts as ''.
    Groups come back in order of first appearance, members in input order.
    """
    records = list(records)
    lookup_names = [trait.casefold() for trait in display_traits]
    groups = {}
    if not records:
        return groups

    if not lookup_names:
        groups[()] = TraitGroup(key=(), members=[_token_slot(record) for record in records])
        return groups

    # Positional column names, display traits may repeat
    columns = [f"trait_{i}" for i in range(len(lookup_names))]
    trait_df = pd.DataFrame([[record.traits.get(name, '') for name in lookup_names] for record in records],
                            columns=columns)

    # A bare column name keeps pandas from warning about length-1 tuple keys
    by = columns[0] if len(columns) == 1 else columns
    for key, frame in trait_df.groupby(by, sort=False):
        if not isinstance(key, tuple):
            key = (key,)
        key = tuple(str(value) for value in key)
        groups[key] = TraitGroup(key=key, members=[_token_slot(records[i]) for i in frame.index])

    logging.info(f"Grouped {len(records)} NFTs into {len(groups)} groups by {', '.join(display_traits)}")
    return groups
