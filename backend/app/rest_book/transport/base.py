"""Transport Interface"""

from typing import Optional, Protocol, Union, runtime_checkable

from backend.app.rest_book.cancellation import CancellationToken
from backend.app.rest_book.models import RequestDescriptor, TransportFailure, TransportSuccess


@runtime_checkable
class Transport(Protocol):
    """실제 네트워크 호출을 수행하는 협력자

    구현체는 실패를 예외 대신 TransportFailure 로 돌려주는 것을 원칙으로 한다.
    엔진은 예상치 못한 예외도 TransportFailure 로 변환한다.
    """

    async def send(
        self,
        request: RequestDescriptor,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Union[TransportSuccess, TransportFailure]:
        ...
