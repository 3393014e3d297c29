from typing import Iterator

from trend.domain.stopwords import MIN_KEYWORD_LENGTH, is_only_numbers, is_stopword


def _clean(text: str) -> str:
    # 문자(모든 문자 체계)와 숫자만 남기고 나머지는 공백으로 치환
    return "".join(ch if ch.isalpha() or ch.isdigit() else " " for ch in text)


def is_keyword_candidate(token: str) -> bool:
    if len(token) < MIN_KEYWORD_LENGTH:
        return False
    if is_only_numbers(token):
        return False
    if is_stopword(token):
        return False
    return True


class TokenSequence:
    """
    제목 하나에서 뽑은 키워드 후보 토큰 시퀀스.
    순회할 때마다 처음부터 다시 계산하므로 여러 번 순회해도 같은 결과를 낸다.
    """

    __slots__ = ("_text",)

    def __init__(self, text: str | None):
        self._text = text or ""

    def __iter__(self) -> Iterator[str]:
        for token in _clean(self._text).lower().split():
            if is_keyword_candidate(token):
                yield token

    def __repr__(self) -> str:
        return f"TokenSequence({self._text!r})"


def tokenize(text: str | None) -> TokenSequence:
    return TokenSequence(text)


def has_korean(text: str | None) -> bool:
    """한글 자모(ㄱ-ㅎ, ㅏ-ㅣ) 또는 음절(가-힣)이 하나라도 있으면 True."""
    if not text:
        return False
    return any(
        "가" <= ch <= "힣" or "ㄱ" <= ch <= "ㅣ"
        for ch in text
    )
