"""Request Models

셀 텍스트 한 개를 파싱한 결과
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import HttpMethod


class RequestBody(BaseModel):
    """요청 본문"""

    model_config = ConfigDict(frozen=True)

    content: str
    content_type: Optional[str] = None


class RequestOptions(BaseModel):
    """전송 옵션 (None = 트랜스포트 기본값)"""

    model_config = ConfigDict(frozen=True)

    timeout: Optional[float] = Field(None, gt=0, description="초 단위 타임아웃")
    follow_redirects: Optional[bool] = None
    max_redirects: Optional[int] = Field(None, ge=0)


class RequestDescriptor(BaseModel):
    """파싱된 요청 (실행 시도마다 한 번 생성, 불변)"""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod = HttpMethod.GET
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[RequestBody] = None
    options: RequestOptions = Field(default_factory=RequestOptions)

    def get_header(self, name: str) -> Optional[str]:
        """대소문자 구분 없이 헤더 조회"""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    @property
    def cache_key(self) -> str:
        return f"{self.method.value} {self.url}"


def set_header(headers: dict[str, str], name: str, value: str) -> None:
    """헤더 설정 (이름 대소문자 무시, 마지막 값 우선)"""
    lowered = name.lower()
    for existing in [key for key in headers if key.lower() == lowered]:
        del headers[existing]
    headers[name] = value
