import argparse
import logging
import sys
import warnings
from dataclasses import dataclass

import gspread
import requests
from google.auth.exceptions import GoogleAuthError

from nftCache import NftCache
from nftErrors import EmptyResultError, NftViewerError
from ownedNfts import fetch_all_owned_nfts
from recordBuilder import build_headers, build_records, image_column_range, max_member_count
from sheetConfig import SheetConfigSource, auth_gspread, get_or_create_worksheet, load_settings, setup_config_sheet
from sheetRenderer import SheetRenderer
from traitGrouper import group_by_traits


@dataclass(frozen=True)
class RunResult:
    sheet_name: str
    group_count: int
    record_count: int
    from_cache: bool


def data_sheet_name(owner, contract):
    return f"{owner[-6:]}/{contract[-6:]}"


class NftTraitViewer:
    """
    Builds the trait table for one owner/contract pair: cached or fetched
    NFTs are grouped by the display traits and handed to the renderer.
    """

    def __init__(self, config, cache, renderer, session=None):
        self.config = config
        self.cache = cache
        self.renderer = renderer
        self.session = session

    def load_records(self, use_cache=True):
        owner = self.config.owner_address
        contract = self.config.contract_address

        if use_cache:
            records = self.cache.read(owner, contract)
            if records is not None:
                if not records:
                    raise EmptyResultError('cache')
                return records, True

        # Fetching raises EmptyResultError on zero records, so the cache only holds real results
        records = fetch_all_owned_nfts(self.config.endpoint, owner, contract, session=self.session)
        self.cache.write(owner, contract, records)
        return records, False

    def run(self, use_cache=True):
        owner = self.config.owner_address
        contract = self.config.contract_address
        display_traits = list(self.config.display_traits)

        records, from_cache = self.load_records(use_cache)
        groups = group_by_traits(records, display_traits)
        max_images = max_member_count(groups)
        image_columns = image_column_range(len(display_traits), max_images)

        headers = build_headers(display_traits, max_images)
        rows = build_records(groups, owner, contract, max_images, image_columns)

        sheet_name = data_sheet_name(owner, contract)
        self.renderer.render(headers, rows, sheet_name, image_count=max_images)
        return RunResult(sheet_name=sheet_name, group_count=len(groups),
                         record_count=len(records), from_cache=from_cache)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Group a wallet's NFTs by trait into a Google Sheet.")
    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('setup', help='Create or reset the Config sheet')
    fetch_parser = subparsers.add_parser('fetch', help='Fetch NFTs and write the trait table')
    fetch_parser.add_argument('--no-cache', action='store_true',
                              help='Ignore cached NFTs and fetch from the API (the cache is still refreshed)')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    warnings.filterwarnings("ignore", category=DeprecationWarning)
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s',
                        handlers=[logging.FileHandler("debug.log"),
                                  logging.StreamHandler()])
    logging.info("Script started")

    try:
        settings = load_settings()
        client = auth_gspread(settings.credentials_file)
        spreadsheet = client.open_by_key(settings.spreadsheet_id)

        if args.command == 'setup':
            setup_config_sheet(spreadsheet, settings.config_sheet)
            return 0

        config = SheetConfigSource(spreadsheet, settings).load()
        cache = NftCache(get_or_create_worksheet(spreadsheet, settings.cache_sheet), settings.chunk_size)
        viewer = NftTraitViewer(config, cache, SheetRenderer(spreadsheet))

        logging.info("Fetching all NFTs... This may take a moment and involve multiple API calls.")
        result = viewer.run(use_cache=not args.no_cache)
    except (NftViewerError, gspread.exceptions.GSpreadException, GoogleAuthError,
            requests.RequestException) as e:
        logging.error(f"Error: {e}")
        return 1

    source = 'cache' if result.from_cache else 'API'
    logging.info(f"Success! {result.group_count} groups ({result.record_count} NFTs from {source}) "
                 f"have been written to the '{result.sheet_name}' sheet.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
