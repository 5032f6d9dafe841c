"""Identity and defaults shared by every pagegrab operation."""

# Browser identity sent by the challenge bypass and the file downloader
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/62.0.3202.62 Safari/537.36"
)

# Playwright device descriptor emulated by the page fetcher
DEVICE_NAME = "Pixel 2 XL"

FILE_EXTENSION = ".torrent"

DEFAULT_TIMEOUT = 30.0

# Cookies Cloudflare sets once its JavaScript challenge is passed
CHALLENGE_COOKIES = (
    "cf_clearance",
    "__cf_bm",
    "cf_chl_2",
    "cf_chl_prog",
    "cf_chl_rc_ni",
)

LOGGER_NAME = "pagegrab"
