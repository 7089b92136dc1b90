import json
import logging
import warnings
from datetime import datetime, timezone

from columnCodec import index_to_label
from nftErrors import CacheCorruptionWarning, ChunkingError
from ownedNfts import OwnershipRecord

CACHE_HEADERS = ['Owner Address', 'Contract Address', 'Timestamp']

# Google Sheets caps a cell at 50,000 characters
DEFAULT_CHUNK_SIZE = 45000


def encode_chunks(records, chunk_size=DEFAULT_CHUNK_SIZE):
    """
    Serialize records into JSON array chunks, each no longer than chunk_size
    characters. Records are packed greedily in order and never split.
    """
    chunks = []
    current = []
    current_size = 2  # the enclosing brackets

    for record in records:
        text = json.dumps(record.to_dict(), separators=(',', ':'))
        if len(text) + 2 > chunk_size:
            raise ChunkingError(f"NFT {record.token_id} serializes to {len(text)} characters, "
                                f"which does not fit in a {chunk_size} character cache chunk.")

        added = len(text) + (1 if current else 0)
        if current and current_size + added > chunk_size:
            chunks.append('[' + ','.join(current) + ']')
            current = []
            current_size = 2
            added = len(text)

        current.append(text)
        current_size += added

    if current:
        chunks.append('[' + ','.join(current) + ']')
    return chunks


def decode_chunks(chunks):
    records = []
    for chunk in chunks:
        data = json.loads(chunk)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array, got {type(data).__name__}")
        records.extend(OwnershipRecord.from_dict(item) for item in data)
    return records


def _same_address(a, b):
    return str(a).strip().lower() == str(b).strip().lower()


class NftCache:
    """
    Owned-NFT cache kept in a worksheet, one row per owner/contract pair:
    [owner, contract, timestamp, chunk 1, chunk 2, ...]
    """

    def __init__(self, worksheet, chunk_size=DEFAULT_CHUNK_SIZE):
        self.worksheet = worksheet
        self.chunk_size = chunk_size

    def _find_row(self, rows, owner, contract):
        for row_number, row in enumerate(rows[1:], start=2):
            if len(row) >= 2 and _same_address(row[0], owner) and _same_address(row[1], contract):
                return row_number, row
        return None, None

    def read(self, owner, contract):
        """Return the cached records, or None on a miss or a corrupted entry."""
        rows = self.worksheet.get_all_values()
        row_number, row = self._find_row(rows, owner, contract)
        if row_number is None:
            logging.info(f"No cache entry for {owner}/{contract}")
            return None

        chunks = [cell for cell in row[3:] if cell]
        try:
            records = decode_chunks(chunks)
        except (ValueError, KeyError, TypeError) as e:
            message = f"Cache entry for {owner}/{contract} is corrupted ({e}); fetching fresh data."
            logging.warning(message)
            warnings.warn(message, CacheCorruptionWarning)
            return None

        timestamp = row[2] if len(row) > 2 else ''
        logging.info(f"Loaded {len(records)} NFTs from {len(chunks)} cache chunk(s) written {timestamp}")
        return records

    def write(self, owner, contract, records):
        # Encode first so a chunking failure leaves the sheet untouched
        chunks = encode_chunks(records, self.chunk_size)
        timestamp = datetime.now(timezone.utc).isoformat(timespec='seconds')
        values = [owner, contract, timestamp] + chunks

        rows = self.worksheet.get_all_values()
        if not rows:
            self.worksheet.update(range_name='A1:C1', values=[CACHE_HEADERS])
            rows = [CACHE_HEADERS]

        row_number, row = self._find_row(rows, owner, contract)
        if row_number is None:
            row_number = len(rows) + 1
            old_width = 0
        else:
            old_width = len(row)

        if len(values) > self.worksheet.col_count:
            self.worksheet.add_cols(len(values) - self.worksheet.col_count)
        if row_number > self.worksheet.row_count:
            self.worksheet.add_rows(row_number - self.worksheet.row_count)

        if old_width:
            self.worksheet.batch_clear([f"A{row_number}:{index_to_label(old_width)}{row_number}"])
        self.worksheet.update(range_name=f"A{row_number}:{index_to_label(len(values))}{row_number}",
                              values=[values], value_input_option='RAW')
        logging.info(f"Cached {len(records)} NFTs for {owner}/{contract} in {len(chunks)} chunk(s)")
