import uuid

import boto3
import pendulum
import pytest
from moto import mock_aws

from app.models.post import Post
from app.settings import Settings


def pytest_configure():
    pytest.aws_default_region = "eu-central-1"
    pytest.auth_base_url = "https://auth.localhost/auth/v1"
    pytest.jwt_secret = "6fl3AkTFmG2rVveLglUW8DOmp8J4Bvi3"


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def aws():
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_resource(aws):
    return boto3.Session().resource("dynamodb", region_name=pytest.aws_default_region)


@pytest.fixture
def owner_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def initialize_posts_table(dynamodb_resource, posts: list[Post], settings: Settings):
    dynamodb_resource.create_table(
        AttributeDefinitions=[
            {
                "AttributeName": "id",
                "AttributeType": "S",
            },
            {
                "AttributeName": "owner_id",
                "AttributeType": "S",
            },
            {
                "AttributeName": "created_at",
                "AttributeType": "S",
            },
        ],
        TableName=settings.posts_table_name,
        KeySchema=[
            {"AttributeName": "id", "KeyType": "HASH"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "OwnerIndex",
                "KeySchema": [
                    {
                        "AttributeName": "owner_id",
                        "KeyType": "HASH",
                    },
                    {
                        "AttributeName": "created_at",
                        "KeyType": "RANGE",
                    },
                ],
                "Projection": {
                    "ProjectionType": "ALL",
                },
            },
        ],
        ProvisionedThroughput={"ReadCapacityUnits": 10, "WriteCapacityUnits": 10},
    )
    dynamodb_resource.create_table(
        AttributeDefinitions=[
            {
                "AttributeName": "owner_id",
                "AttributeType": "S",
            },
            {
                "AttributeName": "key",
                "AttributeType": "S",
            },
        ],
        TableName=settings.drafts_table_name,
        KeySchema=[
            {"AttributeName": "owner_id", "KeyType": "HASH"},
            {"AttributeName": "key", "KeyType": "RANGE"},
        ],
        ProvisionedThroughput={"ReadCapacityUnits": 10, "WriteCapacityUnits": 10},
    )
    table = dynamodb_resource.Table(settings.posts_table_name)
    with table.batch_writer() as batch:
        for post in posts:
            batch.put_item(Item=post.model_dump())


@pytest.fixture
def make_post(faker, owner_id: str):
    def make(owner: str | None = None, days_ago: int = 0) -> Post:
        created_at = pendulum.now("UTC").subtract(days=days_ago).to_iso8601_string()
        return Post(
            id=str(uuid.uuid4()),
            owner_id=owner or owner_id,
            title=faker.sentence(),
            content=f"<p>{faker.text()}</p>",
            published=faker.boolean(),
            views=faker.random_int(0, 100),
            created_at=created_at,
            updated_at=created_at,
        )

    return make


@pytest.fixture
def posts(make_post) -> list[Post]:
    posts = []
    for days_ago in range(10):
        posts.append(make_post(days_ago=days_ago))
    return posts


@pytest.fixture
def foreign_post(make_post, initialize_posts_table, posts_table) -> Post:
    post = make_post(owner=str(uuid.uuid4()))
    posts_table.put_item(Item=post.model_dump())
    return post


@pytest.fixture
def posts_table(dynamodb_resource, settings: Settings):
    return dynamodb_resource.Table(settings.posts_table_name)


@pytest.fixture
def drafts_table(dynamodb_resource, settings: Settings):
    return dynamodb_resource.Table(settings.drafts_table_name)


@pytest.fixture
def s3_resource(aws, settings: Settings):
    s3 = boto3.Session().resource("s3", region_name=pytest.aws_default_region)
    s3.create_bucket(
        Bucket=settings.b2_bucket_name,
        CreateBucketConfiguration={"LocationConstraint": pytest.aws_default_region},
    )
    return s3


@pytest.fixture
def test_data() -> bytes:
    return "Lorem ipsum odor amet, consectetuer adipiscing elit.".encode("utf-8")
