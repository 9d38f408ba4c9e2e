"""Registry of bonsai.co.jp event listing pages, one per region."""
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class EventSource:
    """One regional listing page and the prefectures it covers."""
    region: str
    url: str
    prefectures: Tuple[str, ...]

    def __post_init__(self):
        if not self.prefectures:
            raise ValueError(f"Source '{self.region}' has no prefectures")


BONSAI_EVENT_SOURCES = (
    EventSource('北海道', 'https://www.bonsai.co.jp/event/event_category/hokkaido/',
                ('北海道',)),
    EventSource('東北', 'https://www.bonsai.co.jp/event/event_category/tohoku/',
                ('青森県', '岩手県', '宮城県', '秋田県', '山形県', '福島県')),
    EventSource('関東', 'https://www.bonsai.co.jp/event/event_category/kanto/',
                ('茨城県', '栃木県', '群馬県', '埼玉県', '千葉県', '東京都', '神奈川県')),
    EventSource('信越', 'https://www.bonsai.co.jp/event/event_category/shinetsu/',
                ('新潟県', '長野県')),
    EventSource('北陸', 'https://www.bonsai.co.jp/event/event_category/hokuriku/',
                ('富山県', '石川県', '福井県')),
    EventSource('東海', 'https://www.bonsai.co.jp/event/event_category/tokai/',
                ('岐阜県', '静岡県', '愛知県', '三重県')),
    EventSource('近畿', 'https://www.bonsai.co.jp/event/event_category/kinki/',
                ('滋賀県', '京都府', '大阪府', '兵庫県', '奈良県', '和歌山県')),
    EventSource('中国', 'https://www.bonsai.co.jp/event/event_category/chugoku/',
                ('鳥取県', '島根県', '岡山県', '広島県', '山口県')),
    EventSource('四国', 'https://www.bonsai.co.jp/event/event_category/shikoku/',
                ('徳島県', '香川県', '愛媛県', '高知県')),
    EventSource('九州', 'https://www.bonsai.co.jp/event/event_category/kyusyu/',
                ('福岡県', '佐賀県', '長崎県', '熊本県', '大分県', '宮崎県', '鹿児島県', '沖縄県')),
)

# Every prefecture known to the registry, in registry order
ALL_PREFECTURES = tuple(
    prefecture
    for source in BONSAI_EVENT_SOURCES
    for prefecture in source.prefectures
)


def default_sources() -> List[EventSource]:
    """
    Return the registered sources as a fresh list.

    Returns:
        List of EventSource objects in registry order

    Raises:
        ValueError: If two sources share a region label
    """
    regions = [source.region for source in BONSAI_EVENT_SOURCES]
    if len(set(regions)) != len(regions):
        raise ValueError("Duplicate region in source registry")
    return list(BONSAI_EVENT_SOURCES)
