"""Unit tests for EventProcessor."""
from datetime import date

from processor.event_processor import EventProcessor
from processor.models import RawBlock

KANTO_URL = 'https://www.bonsai.co.jp/event/event_category/kanto/'


class TestEventProcessor:
    """Test cases for EventProcessor class."""

    def test_process_full_block(self):
        """Test that every field is extracted from a complete block."""
        processor = EventProcessor(today=date(2025, 1, 1))
        blocks = [
            RawBlock(
                title='●第10回盆栽展（東京都）',
                content='会期／3月7日～8日 会場／上野公園 主催／日本盆栽協会 入場無料',
                href='https://example.com/event1'
            )
        ]

        events = processor.process_blocks(blocks, '関東', KANTO_URL, ['東京都', '神奈川県'])

        assert len(events) == 1
        event = events[0]
        assert event.title == '第10回盆栽展（東京都）'
        assert event.start_date == date(2025, 3, 7)
        assert event.end_date == date(2025, 3, 8)
        assert event.prefecture == '東京都'
        assert event.venue == '上野公園'
        assert '日本盆栽協会' in event.organizer
        assert event.admission_fee == '入場無料'
        assert event.has_sales is False
        assert event.external_url == 'https://example.com/event1'
        assert event.source_region == '関東'
        assert event.source_url == KANTO_URL

    def test_empty_title_discarded(self):
        """Test that blocks without a title are dropped entirely."""
        processor = EventProcessor()
        blocks = [
            RawBlock(title='', content='内容のみ'),
            RawBlock(title='   ', content='空白のみ'),
            RawBlock(title='◆', content='記号のみ'),
            RawBlock(title='有効なイベント', content='内容'),
        ]

        events = processor.process_blocks(blocks, '関東', KANTO_URL, ['東京都'])

        assert [event.title for event in events] == ['有効なイベント']

    def test_missing_fields_fall_back(self):
        """Test that missing details degrade to None or defaults."""
        processor = EventProcessor()
        blocks = [RawBlock(title='展示会', content='どこかで開催')]

        event = processor.process_blocks(blocks, '関東', KANTO_URL, ['東京都'])[0]

        assert event.start_date is None
        assert event.end_date is None
        assert event.prefecture == '東京都'
        assert event.city is None
        assert event.venue is None
        assert event.organizer is None
        assert event.admission_fee is None
        assert event.external_url is None

    def test_has_sales(self):
        """Test the sales keyword detection."""
        processor = EventProcessor()
        blocks = [RawBlock(title='春の盆栽展示会', content='4月10日 会場／横浜市民ギャラリー 即売あり')]

        event = processor.process_blocks(blocks, '関東', KANTO_URL, ['神奈川県'])[0]

        assert event.has_sales is True
        assert event.city == '横浜市'

    def test_admission_fee(self):
        """Test fee extraction keeps the label and price."""
        processor = EventProcessor()
        blocks = [RawBlock(title='展示会A', content='入場料：500円 ☎ 03-1234-5678')]

        event = processor.process_blocks(blocks, '関東', KANTO_URL, ['東京都'])[0]

        assert event.admission_fee == '入場料：500円'
        assert '入場料：500円' in event.description
        assert '03-1234-5678' not in event.description

    def test_relative_link_resolved(self):
        """Test that a relative detail link becomes absolute."""
        processor = EventProcessor()
        blocks = [RawBlock(title='展示会', content='内容', href='/event/123/')]

        event = processor.process_blocks(blocks, '関東', KANTO_URL, ['東京都'])[0]

        assert event.external_url == 'https://www.bonsai.co.jp/event/123/'

    def test_date_from_title(self):
        """Test that the title is used when the content has no date."""
        processor = EventProcessor(today=date(2025, 1, 1))
        blocks = [RawBlock(title='5月3日 盆栽まつり', content='会場／公園')]

        event = processor.process_blocks(blocks, '関東', KANTO_URL, ['東京都'])[0]

        assert event.start_date == date(2025, 5, 3)

    def test_clean_title(self):
        """Test bullet and whitespace stripping."""
        assert EventProcessor.clean_title('  ★☆ 盆栽展 ') == '盆栽展'
        assert EventProcessor.clean_title(None) == ''
