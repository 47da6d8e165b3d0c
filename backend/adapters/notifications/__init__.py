"""Outbound notification adapters."""

from .article_notifier import ArticleNotifier, build_approval_payload

__all__ = ["ArticleNotifier", "build_approval_payload"]
