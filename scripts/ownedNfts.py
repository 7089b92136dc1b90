import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

from nftErrors import ApiError, EmptyResultError


@dataclass(frozen=True)
class OwnershipRecord:
    token_id: str
    traits: dict = field(default_factory=dict)
    image_url: Optional[str] = None

    def to_dict(self):
        return {'tokenId': self.token_id, 'traits': dict(self.traits), 'imageUrl': self.image_url}

    @classmethod
    def from_dict(cls, data):
        traits = data['traits']
        if not isinstance(traits, dict):
            raise TypeError(f"traits must be an object, got {type(traits).__name__}")
        return cls(token_id=str(data['tokenId']),
                   traits={str(name): str(value) for name, value in traits.items()},
                   image_url=data.get('imageUrl'))


def _is_blank(value):
    # null, false, 0 and '' all count as no value; empty lists/objects do not
    if value is None or value is False or value == '':
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and (value == 0 or value != value)


# Render a JSON trait value the way metadata viewers show it (true, 1 rather than True, 1.0)
def _trait_text(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_trait_lookup(attributes):
    """
    Build a case-folded trait name -> value map from metadata attributes,
    skipping attributes without a name or a value.
    """
    lookup = {}
    for attr in attributes or []:
        if not isinstance(attr, dict):
            continue
        name = attr.get('trait_type')
        value = attr.get('value')
        if not name or _is_blank(value):
            continue
        lookup[str(name).casefold()] = _trait_text(value)
    return lookup


def parse_owned_nft(nft):
    token_id = (nft.get('id') or {}).get('tokenId')
    media = nft.get('media') or []
    if media and media[0]:
        image_url = media[0].get('gateway')
    else:
        image_url = (nft.get('tokenUri') or {}).get('gateway')
    attributes = (nft.get('metadata') or {}).get('attributes')
    return OwnershipRecord(token_id=str(token_id) if token_id is not None else '',
                           traits=build_trait_lookup(attributes),
                           image_url=image_url or None)


# Fetch every page of owned NFTs for the owner/contract pair
def fetch_all_owned_nfts(endpoint, owner, contract, session=None):
    http = session or requests
    url = f"{endpoint.rstrip('/')}/getNFTs"
    records = []
    page_key = None
    page = 0

    while True:
        page += 1
        params = {'owner': owner, 'contractAddresses[]': contract, 'withMetadata': 'true'}
        if page_key:
            params['pageKey'] = page_key

        logging.info(f"Requesting owned NFTs page {page} for {owner}")
        response = http.get(url, params=params, headers={'Content-Type': 'application/json'})
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, response.text)

        data = response.json()
        records.extend(parse_owned_nft(nft) for nft in data.get('ownedNfts') or [])
        page_key = data.get('pageKey')
        if not page_key:
            break

    logging.info(f"Fetched {len(records)} NFTs across {page} page(s)")
    if not records:
        raise EmptyResultError('API')
    return records
