"""Shared fixtures for the event import tests."""
from datetime import date

import boto3
import pytest
from moto import mock_aws

from processor.models import ImportableEvent, ScrapedEvent
from storage.dynamodb_manager import DynamoDBManager

TABLE_NAME = 'test-bonsai-events'


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never reaches a real account."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')


@pytest.fixture
def dynamodb_table(aws_credentials):
    """Create a mock DynamoDB events table."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-east-1')
        table = dynamodb.create_table(
            TableName=TABLE_NAME,
            KeySchema=[
                {'AttributeName': 'event_id', 'KeyType': 'HASH'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'event_id', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST'
        )
        yield table


@pytest.fixture
def dynamodb_manager(dynamodb_table):
    """DynamoDBManager bound to the mock table."""
    return DynamoDBManager(TABLE_NAME, region_name='us-east-1')


def make_scraped_event(title='第10回盆栽展', start_date=date(2025, 3, 7),
                       end_date=None, **overrides):
    """Build a ScrapedEvent with sensible defaults."""
    values = dict(
        title=title,
        start_date=start_date,
        end_date=end_date,
        prefecture='東京都',
        city=None,
        venue='上野公園',
        organizer=None,
        admission_fee='入場無料',
        has_sales=False,
        description='会期／3月7日 会場／上野公園 入場無料',
        external_url=None,
        source_region='関東',
        source_url='https://www.bonsai.co.jp/event/event_category/kanto/'
    )
    values.update(overrides)
    return ScrapedEvent(**values)


def make_importable_event(title='第10回盆栽展', start_date=date(2025, 3, 7), **overrides):
    """Build an ImportableEvent as returned by a preview."""
    scraped = make_scraped_event(title=title, start_date=start_date)
    values = {**scraped.__dict__, 'id': 'scraped-0-1'}
    values.update(overrides)
    return ImportableEvent(**values)


def put_existing(table, event_id, title, start_date, is_hidden=False):
    """Write an already-imported event straight into the table."""
    table.put_item(Item={
        'event_id': event_id,
        'title': title,
        'start_date': start_date,
        'is_hidden': is_hidden,
        'has_sales': False,
        'created_by': 'someone'
    })
