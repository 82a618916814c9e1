"""빌드 로그 수집 및 쿼리 이벤트 추출."""
