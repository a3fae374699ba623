import os
from datetime import date, datetime, timedelta, timezone

import boto3
import pytest
from moto import mock_aws

from jugsite.config import SiteSettings
from jugsite.schemas.event import Event
from jugsite.schemas.post import Post, PostStatus
from scripts.init_dynamodb import create_table_if_not_exists

TEST_TABLE_NAME = "CommunityApp_Test"

CEST = timezone(timedelta(hours=2), "CEST")
CET = timezone(timedelta(hours=1), "CET")


@pytest.fixture
def dynamodb_resource():
    """In-process DynamoDB with a fresh test table for every test"""
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["AWS_ACCESS_KEY_ID"] = "fake"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "fake"

    with mock_aws():
        resource = boto3.resource("dynamodb", region_name="us-east-1")
        create_table_if_not_exists(TEST_TABLE_NAME, resource)
        yield resource


@pytest.fixture
def settings():
    return SiteSettings(table_name=TEST_TABLE_NAME)


@pytest.fixture
def reference_events():
    """Two events as shown on the site: the first with speaker and location"""
    held_on = datetime(2016, 7, 7, 19, 0, tzinfo=CEST)
    event1 = Event.create(
        id=23,
        heldOn=held_on,
        title="name-1",
        description="desc-1",
        createdAt=held_on,
        duration=60,
        speaker="Farin Urlaub",
        location="Am Strand\n4223 Schlaraffenland\n\nirgendwo",
    )

    held_on2 = datetime(2016, 11, 22, 18, 0, tzinfo=CET)
    event2 = Event.create(
        id=42,
        heldOn=held_on2,
        title="name-2",
        description="desc-2",
        createdAt=held_on2,
    )
    return [event1, event2]


@pytest.fixture
def reference_posts():
    foo = Post.create(
        publishedOn=date(2016, 8, 5),
        slug="foo",
        title="foo",
        content="foo",
        status=PostStatus.published,
    )
    bar = Post.create(
        publishedOn=date(2016, 8, 4),
        slug="bar",
        title="bar",
        content="bar",
    )
    return [foo, bar]
