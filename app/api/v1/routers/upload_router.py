from fastapi import APIRouter, Depends, File, UploadFile, status

from app import deps
from app.exceptions import NoFileProvidedException
from app.jwt_bearer import JWTBearer
from app.models.auth import JWTToken
from app.models.response import Upload
from app.services.upload_service import UploadService

ERROR_NO_FILE_PROVIDED = "No file provided"

jwt_bearer = JWTBearer()
router = APIRouter()


async def read_file(file: UploadFile | None) -> bytes:
    if file is None or not file.filename:
        raise NoFileProvidedException(ERROR_NO_FILE_PROVIDED)
    return await file.read()


@router.post("", status_code=status.HTTP_200_OK)
async def upload(
    file: UploadFile | None = File(None),
    token: JWTToken = Depends(jwt_bearer),
    upload_service: UploadService = Depends(deps.upload_service),
) -> Upload:
    data = await read_file(file)
    url = await upload_service.upload(file.filename, file.content_type, data)
    return Upload(url=url)
