from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from splitchat.db.session import get_db
from splitchat.schemas.command import CommandParseRequest, CommandRequest, CommandResult, ParsedCommand
from splitchat.services.command_services import execute_command
from splitchat.core.command_parser import parse
from splitchat.core.dependencies import get_current_user
from splitchat.core.exceptions import SplitBillError

router = APIRouter()

@router.post("/parse", response_model=ParsedCommand)
async def parse_message(data: CommandParseRequest):
    return parse(data.message)

@router.post("/execute", response_model=CommandResult)
async def run_command(data: CommandRequest, db: AsyncSession = Depends(get_db), current_user: str = Depends(get_current_user)):
    try:
        return await execute_command(db, data, current_user)
    except SplitBillError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
