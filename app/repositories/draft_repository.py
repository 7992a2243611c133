import boto3
from aws_lambda_powertools import Logger

from app.settings import Settings

NEW_POST_DRAFT_KEY = "spawnwrite-draft-new"


class DraftRepository:
    """Key-value slots holding unsaved drafts, one table row per owner and key."""

    def __init__(self, settings: Settings):
        self._logger = Logger(utc=True)
        self._table = boto3.resource("dynamodb", region_name=settings.aws_region).Table(
            settings.drafts_table_name
        )

    def get_draft(self, owner_id: str, key: str = NEW_POST_DRAFT_KEY) -> str | None:
        response = self._table.get_item(Key={"owner_id": owner_id, "key": key})
        item = response.get("Item")
        return item["value"] if item else None

    def put_draft(self, owner_id: str, value: str, key: str = NEW_POST_DRAFT_KEY):
        self._table.put_item(Item={"owner_id": owner_id, "key": key, "value": value})

    def delete_draft(self, owner_id: str, key: str = NEW_POST_DRAFT_KEY):
        self._logger.debug(f"Deleting draft {owner_id=} {key=}")
        self._table.delete_item(Key={"owner_id": owner_id, "key": key})
