import logging
import os
from dataclasses import dataclass

import gspread
from dotenv import load_dotenv
from oauth2client.service_account import ServiceAccountCredentials

from nftCache import DEFAULT_CHUNK_SIZE
from nftErrors import ConfigurationError

SCOPE = ["https://spreadsheets.google.com/feeds", "https://www.googleapis.com/auth/drive"]

OWNER_CELL = 'B1'
CONTRACT_CELL = 'B2'
TRAITS_FIRST_ROW = 5


@dataclass(frozen=True)
class Settings:
    endpoint: str
    credentials_file: str
    spreadsheet_id: str
    config_sheet: str = 'Config'
    cache_sheet: str = 'Cache'
    chunk_size: int = DEFAULT_CHUNK_SIZE


@dataclass(frozen=True)
class RunConfig:
    endpoint: str
    owner_address: str
    contract_address: str
    display_traits: tuple


def validate_endpoint(endpoint):
    if not endpoint or not endpoint.startswith('https://'):
        raise ConfigurationError("ALCHEMY_API_URL is invalid or missing. "
                                 "Set it to your Alchemy endpoint URL (https://...) in the environment or .env file.")
    return endpoint


def load_settings(environ=None):
    """Read settings from the environment, loading .env first when no mapping is given."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    endpoint = validate_endpoint(environ.get('ALCHEMY_API_URL', '').strip())
    credentials_file = environ.get('GOOGLE_CREDENTIALS_FILE', '').strip()
    spreadsheet_id = environ.get('SPREADSHEET_ID', '').strip()
    if not credentials_file:
        raise ConfigurationError("GOOGLE_CREDENTIALS_FILE must point to a service account key file.")
    if not spreadsheet_id:
        raise ConfigurationError("SPREADSHEET_ID must be set to the target spreadsheet's key.")

    raw_chunk_size = environ.get('CACHE_CHUNK_SIZE', '').strip()
    try:
        chunk_size = int(raw_chunk_size) if raw_chunk_size else DEFAULT_CHUNK_SIZE
    except ValueError:
        raise ConfigurationError(f"CACHE_CHUNK_SIZE must be a whole number, got {raw_chunk_size!r}.")
    if chunk_size <= 0:
        raise ConfigurationError(f"CACHE_CHUNK_SIZE must be positive, got {chunk_size}.")

    return Settings(endpoint=endpoint,
                    credentials_file=credentials_file,
                    spreadsheet_id=spreadsheet_id,
                    config_sheet=environ.get('CONFIG_SHEET', '').strip() or 'Config',
                    cache_sheet=environ.get('CACHE_SHEET', '').strip() or 'Cache',
                    chunk_size=chunk_size)


# Function to authenticate with Google Sheets
def auth_gspread(credentials_file):
    try:
        creds = ServiceAccountCredentials.from_json_keyfile_name(credentials_file, SCOPE)
        return gspread.authorize(creds)
    except Exception as e:
        logging.error(f"Failed to authenticate with Google Sheets: {e}")
        raise ConfigurationError(f"Could not authenticate with Google Sheets using {credentials_file}: {e}") from e


def get_or_create_worksheet(spreadsheet, title, rows=100, cols=26):
    try:
        return spreadsheet.worksheet(title)
    except gspread.exceptions.WorksheetNotFound:
        logging.info(f"Creating worksheet {title}")
        return spreadsheet.add_worksheet(title=title, rows=rows, cols=cols)


def setup_config_sheet(spreadsheet, title='Config'):
    worksheet = get_or_create_worksheet(spreadsheet, title)
    worksheet.clear()
    worksheet.update(range_name='A1:A2', values=[['Owner Address:'], ['Contract Address:']])
    worksheet.update(range_name='A4', values=[['Traits to Display (one per cell below):']])
    worksheet.format('A1:A2', {'textFormat': {'bold': True}})
    worksheet.format('A4', {'textFormat': {'bold': True}})
    logging.info(f"Config sheet '{title}' has been set up. Enter the addresses in {OWNER_CELL} and "
                 f"{CONTRACT_CELL}, and the traits to display starting from A{TRAITS_FIRST_ROW}.")
    return worksheet


def build_run_config(endpoint, owner_address, contract_address, display_traits):
    owner_address = str(owner_address or '').strip()
    contract_address = str(contract_address or '').strip()
    display_traits = tuple(str(trait).strip() for trait in display_traits if str(trait or '').strip())

    validate_endpoint(endpoint)
    if not owner_address or not contract_address:
        raise ConfigurationError("Owner Address and Contract Address must be entered in the Config sheet.")
    if not display_traits:
        raise ConfigurationError(f"Please specify at least one trait to display in the Config sheet "
                                 f"(starting from cell A{TRAITS_FIRST_ROW}).")
    return RunConfig(endpoint=endpoint,
                     owner_address=owner_address,
                     contract_address=contract_address,
                     display_traits=display_traits)


class SheetConfigSource:
    """Reads the owner, contract and display traits from the Config sheet."""

    def __init__(self, spreadsheet, settings):
        self.spreadsheet = spreadsheet
        self.settings = settings

    def load(self):
        try:
            worksheet = self.spreadsheet.worksheet(self.settings.config_sheet)
        except gspread.exceptions.WorksheetNotFound:
            raise ConfigurationError(f'Sheet "{self.settings.config_sheet}" not found. '
                                     f'Please run "setup" first.')

        owner_address = worksheet.acell(OWNER_CELL).value
        contract_address = worksheet.acell(CONTRACT_CELL).value
        display_traits = worksheet.col_values(1)[TRAITS_FIRST_ROW - 1:]
        return build_run_config(self.settings.endpoint, owner_address, contract_address, display_traits)
