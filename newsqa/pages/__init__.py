from newsqa.pages.hacker_news import HackerNewsPage, PlaywrightItem

__all__ = ["HackerNewsPage", "PlaywrightItem"]
