"""Core 설정, 모델, 에러 정의."""
