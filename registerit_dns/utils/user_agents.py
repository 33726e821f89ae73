"""
Random desktop User-Agent strings.

The panel applies anti-bot heuristics to the login form, so every session
presents a freshly picked browser identity.
"""

import random
from typing import Dict, List, Optional

PLATFORMS: Dict[str, str] = {
    "windows": "Windows NT 10.0; Win64; x64",
    "mac": "Macintosh; Intel Mac OS X 10_15_7",
    "linux": "X11; Linux x86_64",
}

CHROME_VERSIONS: List[str] = ["124.0.0.0", "125.0.0.0", "126.0.0.0", "127.0.0.0", "128.0.0.0"]
FIREFOX_VERSIONS: List[str] = ["125.0", "126.0", "127.0", "128.0"]

TEMPLATES: Dict[str, str] = {
    "chrome": (
        "Mozilla/5.0 ({platform}) AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/{version} Safari/537.36"
    ),
    "firefox": "Mozilla/5.0 ({platform}; rv:{version}) Gecko/20100101 Firefox/{version}",
}


def build_user_agent(browser: str, platform: str, version: str) -> str:
    """Format a User-Agent string for a browser, platform key and version."""
    template = TEMPLATES.get(browser)
    if template is None:
        raise KeyError(f"unknown browser '{browser}'")
    platform_token = PLATFORMS.get(platform)
    if platform_token is None:
        raise KeyError(f"unknown platform '{platform}'")
    return template.format(platform=platform_token, version=version)


def random_user_agent(rng: Optional[random.Random] = None) -> str:
    """Pick a random browser, platform and version."""
    rng = rng or random
    browser = rng.choice(sorted(TEMPLATES))
    versions = CHROME_VERSIONS if browser == "chrome" else FIREFOX_VERSIONS
    return build_user_agent(browser, rng.choice(sorted(PLATFORMS)), rng.choice(versions))
