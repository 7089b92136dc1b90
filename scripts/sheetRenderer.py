import logging

from columnCodec import index_to_label
from recordBuilder import FIXED_HEADERS
from sheetConfig import get_or_create_worksheet

ROW_HEIGHT = 32
IMAGE_COLUMN_WIDTH = 32


def _dimension_size(sheet_id, dimension, start, end, pixels):
    return {
        'updateDimensionProperties': {
            'range': {'sheetId': sheet_id, 'dimension': dimension, 'startIndex': start, 'endIndex': end},
            'properties': {'pixelSize': pixels},
            'fields': 'pixelSize',
        }
    }


class SheetRenderer:
    """Writes the trait table into a worksheet of the spreadsheet."""

    def __init__(self, spreadsheet):
        self.spreadsheet = spreadsheet

    def render(self, headers, rows, sheet_key, image_count=0):
        row_count = len(rows) + 1
        worksheet = get_or_create_worksheet(self.spreadsheet, sheet_key, rows=row_count, cols=len(headers))
        worksheet.clear()
        worksheet.resize(rows=row_count, cols=len(headers))

        last_column = index_to_label(len(headers))
        worksheet.update(range_name=f"A1:{last_column}{row_count}", values=[headers] + rows,
                         value_input_option='USER_ENTERED')
        worksheet.format(f"A1:{last_column}1", {'textFormat': {'bold': True}})

        # Owner and contract columns (B:C)
        worksheet.hide_columns(1, len(FIXED_HEADERS))
        worksheet.set_basic_filter(f"A1:{last_column}{row_count}")

        if rows:
            trait_count = len(headers) - len(FIXED_HEADERS) - image_count
            if trait_count > 0:
                worksheet.columns_auto_resize(len(FIXED_HEADERS), len(FIXED_HEADERS) + trait_count)

            requests = [_dimension_size(worksheet.id, 'ROWS', 1, row_count, ROW_HEIGHT)]
            if image_count > 0:
                requests.append(_dimension_size(worksheet.id, 'COLUMNS', len(headers) - image_count,
                                                len(headers), IMAGE_COLUMN_WIDTH))
            self.spreadsheet.batch_update({'requests': requests})

        logging.info(f"Wrote {len(rows)} rows to worksheet {sheet_key}")
        return worksheet
