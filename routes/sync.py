from fastapi import APIRouter

from services.sheets_client import SheetsClient, SheetsError
from services.sync_service import sync_from_sheets

router = APIRouter()


@router.post("/sync")
def sync_spreadsheet():
    """Pull every tab of the configured spreadsheet into the local store."""
    try:
        client = SheetsClient.from_config()
        counts = sync_from_sheets(client)
    except SheetsError as e:
        return {"success": False, "error": str(e)}

    return {"success": True, "rows": counts}
