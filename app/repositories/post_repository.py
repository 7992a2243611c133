from typing import Any

import boto3
from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr, ConditionBase, Key
from botocore.exceptions import ClientError

from app.settings import Settings

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def _is_conditional_check_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


class PostRepository:
    OWNER_INDEX = "OwnerIndex"

    def __init__(self, settings: Settings):
        self._logger = Logger(utc=True)
        self._table = boto3.resource("dynamodb", region_name=settings.aws_region).Table(
            settings.posts_table_name
        )

    @staticmethod
    def _owned_by(owner_id: str) -> ConditionBase:
        return Attr("owner_id").eq(owner_id)

    def create_post(self, data: dict):
        self._table.put_item(Item=data, ConditionExpression=Attr("id").not_exists())

    def upsert_post(self, data: dict) -> bool:
        try:
            self._table.put_item(
                Item=data,
                ConditionExpression=Attr("id").not_exists()
                | self._owned_by(data["owner_id"]),
            )
        except ClientError as e:
            if _is_conditional_check_failure(e):
                self._logger.warning(f"Refused to overwrite post id={data['id']}")
                return False
            raise
        return True

    def delete_post(self, post_uuid: str, owner_id: str) -> bool:
        try:
            self._table.delete_item(
                Key={"id": post_uuid},
                ConditionExpression=Attr("id").exists() & self._owned_by(owner_id),
            )
        except ClientError as e:
            if _is_conditional_check_failure(e):
                return False
            raise
        return True

    def get_post_by_uuid(self, post_uuid: str) -> dict | None:
        response = self._table.get_item(Key={"id": post_uuid})
        return response.get("Item")

    def get_posts_by_owner(
        self, owner_id: str, fields: list[str] | None = None
    ) -> list[dict[str, Any]]:
        kwargs = {
            "IndexName": self.OWNER_INDEX,
            "KeyConditionExpression": Key("owner_id").eq(owner_id),
            "ScanIndexForward": False,
        }
        if fields:
            kwargs["ProjectionExpression"] = ",".join(f"#{f}" for f in fields)
            kwargs["ExpressionAttributeNames"] = {f"#{f}": f for f in fields}
        items = []
        response = self._table.query(**kwargs)
        items.extend(response["Items"])
        while "LastEvaluatedKey" in response:
            response = self._table.query(
                ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs
            )
            items.extend(response["Items"])
        return items

    def update_post(self, post_uuid: str, owner_id: str, data: dict) -> dict | None:
        attr_names = {f"#{k}": k for k in data}
        attr_values = {f":{k}": v for k, v in data.items()}
        update_expr = ", ".join(f"#{k}=:{k}" for k in data)
        try:
            response = self._table.update_item(
                Key={"id": post_uuid},
                ConditionExpression=Attr("id").exists() & self._owned_by(owner_id),
                UpdateExpression=f"SET {update_expr}",
                ExpressionAttributeNames=attr_names,
                ExpressionAttributeValues=attr_values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if _is_conditional_check_failure(e):
                return None
            raise
        return response["Attributes"]
