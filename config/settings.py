import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class YouTubeSettings:
    api_key: str = os.getenv("YOUTUBE_API_KEY", "")
    quota_user: str | None = os.getenv("YOUTUBE_QUOTA_USER")


@dataclass
class CollectorSettings:
    # 쇼츠 판정 기준(초). 이 값 이하이면 is_shorts=True
    shorts_max_duration_sec: int = int(os.getenv("SHORTS_MAX_DURATION_SEC", "61"))
    max_pages: int = int(os.getenv("COLLECT_MAX_PAGES", "4"))
    page_size: int = int(os.getenv("COLLECT_PAGE_SIZE", "50"))


@dataclass
class KeywordSettings:
    min_pool_videos: int = int(os.getenv("KEYWORD_MIN_POOL_VIDEOS", "10"))
    min_video_count: int = int(os.getenv("KEYWORD_MIN_VIDEO_COUNT", "2"))
    max_results: int = int(os.getenv("KEYWORD_MAX_RESULTS", "200"))
    sample_size: int = int(os.getenv("KEYWORD_SAMPLE_SIZE", "3"))
    trend_lookback_days: int = int(os.getenv("TREND_LOOKBACK_DAYS", "7"))
    korean_only_for_kr: bool = _env_bool("KEYWORD_KOREAN_ONLY_FOR_KR", "false")


@dataclass
class BatchSettings:
    timezone: str = os.getenv("PIPELINE_TIMEZONE", "Asia/Seoul")
    category_delay_sec: float = float(os.getenv("BATCH_CATEGORY_DELAY_SEC", "1.0"))
    region_delay_sec: float = float(os.getenv("BATCH_REGION_DELAY_SEC", "1.0"))
    enabled: bool = _env_bool("ENABLE_SHORTS_BATCH")
    run_hour: int = int(os.getenv("SHORTS_BATCH_RUN_HOUR", "0"))
    cron_secret: str | None = os.getenv("CRON_SECRET")
