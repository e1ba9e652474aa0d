"""
Bulk Pricing Exception Classes

벌크 프라이싱 엔진의 구조화된 에러 정의
"""
from typing import Optional, Dict, Any


class BulkPricingError(Exception):
    """
    Base exception for all bulk pricing errors

    Attributes:
        message: 에러 메시지
        error_code: 에러 코드
        status_code: API 응답 시 사용할 HTTP 상태 코드
        context: 추가 컨텍스트 정보
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """에러 정보를 딕셔너리로 변환"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }


class BusinessRuleError(BulkPricingError):
    """
    비즈니스 규칙 위반 (기본가 <= 원가, 기본 설정 삭제 등)

    쓰기 작업 전에 발생하므로 DB 변경이 일어나지 않습니다.
    """

    def __init__(self, message: str, rule: Optional[str] = None, field: Optional[str] = None, **kwargs):
        context = {"rule": rule, "field": field}
        context.update(kwargs)
        super().__init__(message=message, error_code="BUSINESS_RULE_ERROR", context=context)
        self.rule = rule
        self.field = field


class DuplicateConfigNameError(BulkPricingError):
    status_code = 409

    def __init__(self, name: str):
        super().__init__(
            message=f"이미 사용 중인 설정 이름입니다: {name}",
            error_code="DUPLICATE_CONFIG_NAME",
            context={"name": name},
        )
        self.name = name


class ConfigNotFoundError(BulkPricingError):
    status_code = 404

    def __init__(self, config_id: Optional[int] = None, name: Optional[str] = None):
        super().__init__(
            message="벌크 프라이싱 설정을 찾을 수 없습니다",
            error_code="CONFIG_NOT_FOUND",
            context={"config_id": config_id, "name": name},
        )


class PlanNotFoundError(BulkPricingError):
    status_code = 404

    def __init__(self, plan_id: int):
        super().__init__(
            message=f"호스팅 플랜을 찾을 수 없습니다: {plan_id}",
            error_code="PLAN_NOT_FOUND",
            context={"plan_id": plan_id},
        )
        self.plan_id = plan_id


class BulkPricingApplyError(BulkPricingError):
    """
    적용(Apply) 중 저장 실패. 트랜잭션은 롤백된 상태입니다.
    """

    status_code = 500

    def __init__(self, message: str = "벌크 프라이싱 적용 중 오류가 발생했습니다. 다시 시도해주세요.", **kwargs):
        super().__init__(message=message, error_code="APPLY_FAILED", context=kwargs)
