"""Defaults for endpoints, engines, dimensions, scoring systems and prompt templates."""

# API endpoints
DEFAULT_WEBSEARCH_URL = "https://open.bigmodel.cn/api/paas/v4/web_search"
DEFAULT_EVALUATION_URL = "https://open.bigmodel.cn/api/paas/v4/chat/completions"
DEFAULT_MODEL_KEY = "glm-4-plus"

# HTTP timeouts (seconds)
SEARCH_TIMEOUT = 30.0
EVALUATION_TIMEOUT = 120.0

# Search request defaults
DEFAULT_SEARCH_COUNT = 10
DEFAULT_RECENCY_FILTER = "noLimit"
DEFAULT_CONTENT_SIZE = "medium"
DEFAULT_USER_ID = "default_user"

# Chat-completion request defaults (client level)
DEFAULT_TEMPERATURE = 0.6
DEFAULT_MAX_TOKENS = 4000

# Per-dimension grading call settings
SCORING_TEMPERATURE = 0.1
SCORING_MAX_TOKENS = 3000
SCORING_DELAY_SECONDS = 1.0  # Fixed pause between scoring calls

# Evaluation rounds offered by the UI
DEFAULT_ROUNDS = 3
ROUND_CHOICES = [1, 2, 3, 5]

# Streaming
SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"

# Progress label used for the final notification
PROGRESS_COMPLETE_LABEL = "complete"

DEFAULT_SEARCH_ENGINES = [
    {"id": 1, "code": "search_std", "name": "智谱基础版搜索引擎"},
    {"id": 3, "code": "search_pro_sogou", "name": "搜狗"},
]

# Engines known to the search API but disabled by default
OPTIONAL_SEARCH_ENGINES = [
    {"id": 2, "code": "search_pro", "name": "智谱高阶版搜索引擎"},
    {"id": 4, "code": "search_pro_quark", "name": "夸克搜索"},
]

# Authority, relevance, freshness
DEFAULT_DIMENSIONS = [
    {"id": 1, "name": "权威性", "weight": 0.4, "enabled": True},
    {"id": 2, "name": "相关性", "weight": 0.35, "enabled": True},
    {"id": 3, "name": "时效性", "weight": 0.25, "enabled": True},
]

NEW_DIMENSION_WEIGHT = 0.33

BINARY_SCORING_SYSTEM = "binary"
FIVE_POINT_SCORING_SYSTEM = "fivePoint"

DEFAULT_SCORING_SYSTEMS = [
    {"key": BINARY_SCORING_SYSTEM, "label": "二分制 (0-2分)", "min_score": 0, "max_score": 2},
    {"key": FIVE_POINT_SCORING_SYSTEM, "label": "五分制 (1-5分)", "min_score": 1, "max_score": 5},
]

DEFAULT_PROMPT_TEMPLATES: dict[str, dict[str, str]] = {
    BINARY_SCORING_SYSTEM: {
        "权威性": "请评估搜索结果的权威性（0-2分）：\n0分：来源不可靠或无权威性\n1分：来源一般可靠\n2分：来源高度权威可靠",
        "相关性": "请评估搜索结果的相关性（0-2分）：\n0分：与查询完全不相关\n1分：部分相关\n2分：高度相关",
        "时效性": "请评估搜索结果的时效性（0-2分）：\n0分：信息过时\n1分：信息较新\n2分：信息最新",
    },
    FIVE_POINT_SCORING_SYSTEM: {
        "权威性": "请评估搜索结果的权威性（1-5分）：\n1分：来源不可靠\n2分：来源可靠性较低\n3分：来源一般可靠\n4分：来源较为权威\n5分：来源高度权威",
        "相关性": "请评估搜索结果的相关性（1-5分）：\n1分：完全不相关\n2分：相关性较低\n3分：部分相关\n4分：较为相关\n5分：高度相关",
        "时效性": "请评估搜索结果的时效性（1-5分）：\n1分：信息严重过时\n2分：信息较为过时\n3分：信息一般\n4分：信息较新\n5分：信息最新",
    },
}

# Prompt fragments
SCORING_SYSTEM_MESSAGE = (
    "你是一个专业的搜索引擎评测专家。请严格按照用户要求的结构化格式输出评测结果，"
    "确保在\"最终得分：\"后面给出明确的数字分数。"
)
DIMENSION_PROMPT_FALLBACK = "请从{name}维度评价搜索结果的质量"
FINAL_SCORE_LABEL = "最终得分"

# Summary display
SCORE_BAR_GOOD = 80.0
SCORE_BAR_FAIR = 60.0
TREND_MIN_HEIGHT = 10.0
LOG_DETAIL_LIMIT = 4
