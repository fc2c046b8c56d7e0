"""Shared constants: job board URLs, DOM selectors, and filter tables."""

from __future__ import annotations

# --- Job board ---
SEARCH_BASE_URL = "https://www.linkedin.com/jobs/search/"
LOGIN_URL = "https://www.linkedin.com/login"
PAGE_SIZE = 25  # results per search page

DATE_POSTED_FILTERS: dict[str, str] = {
    "past24hours": "r86400",
    "pastWeek": "r604800",
    "pastMonth": "r2592000",
}

EXPERIENCE_FILTERS: dict[str, str] = {
    "internship": "1",
    "entry": "2",
    "associate": "3",
    "mid-senior": "4",
    "director": "5",
    "executive": "6",
}

JOB_TYPE_FILTERS: dict[str, str] = {
    "full-time": "F",
    "part-time": "P",
    "contract": "C",
    "temporary": "T",
    "internship": "I",
    "volunteer": "V",
    "other": "O",
}

SORT_BY_CODES: dict[str, str] = {
    "relevance": "R",
    "recent": "DD",
}

REMOTE_FILTER_CODE = "2"
SEARCH_ORIGIN = "JOB_SEARCH_PAGE_JOB_FILTER"

# --- Login page ---
LOGIN_USERNAME_SELECTOR = "#username"
LOGIN_PASSWORD_SELECTOR = "#password"
LOGIN_SUBMIT_SELECTOR = 'button[type="submit"]'
LOGGED_IN_MARKER_SELECTOR = ".global-nav__a11y-menu"

# --- Search results page ---
TOTAL_COUNT_SELECTOR = ".jobs-search-results-list__subtitle span"
RESULTS_CONTAINER_SELECTOR = ".scaffold-layout__list > div:not(.scaffold-layout__list-header)"
RESULTS_LIST_SELECTOR = "[data-results-list-top-scroll-sentinel] + ul"
LISTING_CARD_SELECTOR = ".scaffold-layout__list-item"
CARD_TITLE_SELECTORS: tuple[str, ...] = (
    ".job-card-list__title--link span",
    ".job-card-list__title--link",
)
CARD_LINK_SELECTOR = ".job-card-list__title--link"
CARD_COMPANY_SELECTOR = ".artdeco-entity-lockup__subtitle"
CARD_LOCATION_SELECTOR = ".job-card-container__metadata-wrapper"
CARD_EASY_APPLY_SELECTOR = ".job-card-container__footer-item > svg.job-card-list__icon ~ span"
EASY_APPLY_LABEL = "Easy Apply"

# --- Job detail page ---
DETAIL_PANEL_SELECTOR = ".job-view-layout .jobs-details"
APPLY_BUTTON_SELECTORS: tuple[str, ...] = (
    ".jobs-apply-button--top-card",
    'button[data-control-name="jobdetails_topcard_inapply"]',
    ".jobs-apply-button",
)
OFFSITE_APPLY_LINK_SELECTOR = (
    'a[data-tracking-control-name="public_jobs_apply-link-offsite_sign_up"]'
)
SKILL_CHIP_SELECTOR = ".styles_chip__7YCfG"
DESCRIPTION_SELECTOR = ".styles_JDC__dang-inner-html__h0K4t"
DETAIL_STAT_SELECTOR = ".styles_jhc__stat__PgY67"

# --- Title filter ---
TITLE_REQUIRED_PATTERN = r"developer|engineer"
FULLSTACK_TITLE_PATTERN = r"fullstack\s*(developer|engineer)"
FULLSTACK_NODE_KEYWORDS: tuple[str, ...] = ("node", "node.js", "nodejs", "backend")

TITLE_DENY_KEYWORDS: tuple[str, ...] = (
    # UI and design
    "ui",
    "ui/ux",
    "ux",
    "design",
    "angular",
    "vue",
    "html",
    "junior",
    "phalcon",
    "mulesoft",
    "oic",
    "aem",
    "golang",
    "blockchain",
    "qx",
    "koa",
    "middleware",
    "node",
    "ruby",
    "rails",
    "adobe",
    "core",
    "fusion",
    "power",
    "senior",
    "lucee",
    "coldfusion",
    "hybrid",
    "product",
    "devops",
    "solution",
    # Mobile and platform-specific
    "mobile",
    "android",
    "native",
    "ios",
    "mobile app",
    "mobile application",
    "android developer",
    "ios developer",
    "mobile dev",
    "apps",
    "flutter",
    # Backend and enterprise
    ".net",
    "dotnet",
    "aspnet",
    "c#",
    "java",
    "j2ee",
    "enterprise",
    "backend",
    "server-side",
    # Web platforms
    "wordpress",
    "laravel",
    "php",
    "drupal",
    "joomla",
    "content management",
    "cms developer",
    "rust",
    "python",
    # CRM and ERP
    "salesforce",
    "crm",
    "dynamics",
    "oracle",
    "sap",
    "enterprise resource planning",
    "erp",
    # Other domains
    "embedded",
    "hardware",
    "firmware",
    "game",
    "security",
    "network",
    "system",
    "cloud",
    "qa",
    "abinitio",
    "data",
)

# --- Skill scoring ---
# name -> (primary variations, related variations, weight)
SKILL_SETS: tuple[tuple[str, tuple[str, ...], tuple[str, ...], int], ...] = (
    (
        "React",
        ("react", "reactjs", "react.js"),
        ("javascript", "js", "frontend", "front-end", "front end"),
        5,
    ),
    ("Next.js", ("next", "nextjs", "next.js"), ("react", "javascript", "js"), 4),
    ("JavaScript", ("javascript", "js", "ecmascript"), ("frontend", "web", "es6", "es2015"), 4),
    ("Redux", ("redux", "redux toolkit", "rtk"), ("react", "state management"), 3),
    ("TypeScript", ("typescript", "ts"), ("javascript", "type safety", "typed"), 4),
)

KEYWORD_TRIPLETS: tuple[tuple[str, str, str], ...] = (
    ("react", "javascript", "frontend"),
    ("react", "typescript", "frontend"),
    ("react", "redux", "javascript"),
    ("react", "next", "typescript"),
    ("react", "redux", "typescript"),
    ("frontend", "javascript", "typescript"),
    ("react", "frontend", "developer"),
    ("react", "ui", "developer"),
    ("typescript", "next", "frontend"),
    ("react", "api", "frontend"),
    ("react", "component", "development"),
    ("react", "web", "application"),
    ("frontend", "react", "experienced"),
)

MIN_MATCH_PERCENTAGE = 45.0
APPLICANTS_PER_OPENING = 350
MIN_APPLICANT_LIMIT = 100
