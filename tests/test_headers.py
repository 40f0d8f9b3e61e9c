import unittest

from zai_client import headers
from zai_client.config import Config, reset_config, set_config
from zai_client.constants import BROWSER_CHOICES, CHROMIUM_USER_AGENTS, FIREFOX_USER_AGENT, SAFARI_USER_AGENT


class FixedChoice:
    def __init__(self, value):
        self.value = value

    def choice(self, seq):
        return self.value


def make_config() -> Config:
    config = Config(config_path="/nonexistent/config.json")
    config.origin = "https://chat.z.ai"
    return config


class TestBuildBrowserHeaders(unittest.TestCase):
    def setUp(self) -> None:
        self.config = make_config()
        set_config(self.config)

    def tearDown(self) -> None:
        reset_config()

    def test_every_browser_gets_required_headers(self):
        for browser in set(BROWSER_CHOICES):
            with self.subTest(browser=browser):
                h = headers.build_browser_headers(rng=FixedChoice(browser), config=self.config)
                for name in ("Content-Type", "Accept", "User-Agent", "Origin"):
                    self.assertIn(name, h)
                self.assertEqual(h["Content-Type"], "application/json")
                self.assertEqual(h["Accept"], "application/json, text/event-stream")
                self.assertEqual(h["Origin"], "https://chat.z.ai")
                self.assertEqual(h["X-FE-Version"], "prod-fe-1.0.79")
                self.assertEqual("sec-ch-ua" in h, browser != "firefox")

    def test_firefox_omits_sec_ch_ua(self):
        h = headers.build_browser_headers(rng=FixedChoice("firefox"), config=self.config)
        self.assertEqual(h["User-Agent"], FIREFOX_USER_AGENT)
        self.assertNotIn("sec-ch-ua", h)

    def test_edge_gets_edge_branding(self):
        h = headers.build_browser_headers(rng=FixedChoice("edge"), config=self.config)
        self.assertEqual(h["User-Agent"], CHROMIUM_USER_AGENTS[1])
        self.assertEqual(
            h["sec-ch-ua"],
            '"Microsoft Edge";v="139", "Chromium";v="139", "Not_A Brand";v="24"',
        )

    def test_chrome_gets_chromium_branding(self):
        h = headers.build_browser_headers(rng=FixedChoice("chrome"), config=self.config)
        self.assertEqual(
            h["sec-ch-ua"],
            '"Not_A Brand";v="8", "Chromium";v="139", "Google Chrome";v="139"',
        )

    def test_safari_falls_into_generic_branch(self):
        h = headers.build_browser_headers(rng=FixedChoice("safari"), config=self.config)
        self.assertEqual(h["User-Agent"], SAFARI_USER_AGENT)
        self.assertIn('"Chromium";v="139"', h["sec-ch-ua"])

    def test_unknown_browser_uses_cached_random_agent(self):
        h = headers.build_browser_headers(rng=FixedChoice("opera"), config=self.config)
        self.assertEqual(h["User-Agent"], headers.get_user_agents()["random"])
        self.assertIn(h["User-Agent"], CHROMIUM_USER_AGENTS)

    def test_referer_only_with_chat_id(self):
        without = headers.build_browser_headers(rng=FixedChoice("chrome"), config=self.config)
        self.assertNotIn("Referer", without)
        with_id = headers.build_browser_headers("abc-123", rng=FixedChoice("chrome"), config=self.config)
        self.assertEqual(with_id["Referer"], "https://chat.z.ai/c/abc-123")

    def test_origin_trailing_slash_is_dropped(self):
        self.config.origin = "https://example.test/"
        h = headers.build_browser_headers("x", rng=FixedChoice("chrome"), config=self.config)
        self.assertEqual(h["Origin"], "https://example.test")
        self.assertEqual(h["Referer"], "https://example.test/c/x")

    def test_default_rng(self):
        h = headers.build_browser_headers(config=self.config)
        self.assertIn("User-Agent", h)

    def test_headers_are_fresh_per_call(self):
        first = headers.build_browser_headers(rng=FixedChoice("chrome"), config=self.config)
        first["Accept"] = "*/*"
        second = headers.build_browser_headers(rng=FixedChoice("chrome"), config=self.config)
        self.assertEqual(second["Accept"], "application/json, text/event-stream")


class TestUserAgentCache(unittest.TestCase):
    def test_cache_is_built_once(self):
        self.assertIs(headers.get_user_agents(), headers.get_user_agents())
        self.assertEqual(
            set(headers.get_user_agents()),
            {"chrome", "edge", "firefox", "safari", "random"},
        )


class TestVersionParsing(unittest.TestCase):
    def test_extracts_major_version(self):
        ua = "Mozilla/5.0 AppleWebKit/537.36 Chrome/141.0.1.2 Safari/537.36"
        self.assertEqual(headers.parse_major_version(ua, "Chrome/"), "141")

    def test_missing_marker_uses_default(self):
        self.assertEqual(headers.parse_major_version(FIREFOX_USER_AGENT, "Chrome/"), "139")

    def test_empty_version_uses_default(self):
        self.assertEqual(headers.parse_major_version("Foo Chrome/", "Chrome/"), "139")

    def test_edge_without_version_falls_back_to_chromium_value(self):
        ua = "Mozilla/5.0 Chrome/120.0.0.0 Safari/537.36 Edg/"
        self.assertEqual(
            headers.build_sec_ch_ua(ua),
            '"Not_A Brand";v="8", "Chromium";v="120", "Google Chrome";v="120"',
        )


if __name__ == "__main__":
    unittest.main()
