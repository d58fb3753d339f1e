"""Sprintboard: 스프린트 계획 데이터 접근 계층 (Sprint planning data-access layer)."""

__version__ = "1.0.0"
