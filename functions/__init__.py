"""functions - 레코드 처리기 모음."""
