# lucent_shop/core/locales.py

# Errors: generic
ERROR_INTERNAL = "서버 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
ERROR_VALIDATION = "입력값이 올바르지 않습니다."
ERROR_UNAUTHENTICATED = "인증이 필요합니다."
ERROR_FORBIDDEN = "권한이 없습니다."
ERROR_NOT_FOUND = "리소스를 찾을 수 없습니다."

# Errors: products and cart
ERROR_PRODUCT_NOT_FOUND = "상품을 찾을 수 없습니다."
ERROR_PRODUCT_NOT_FOUND_ID = "상품을 찾을 수 없습니다: {product_id}"
ERROR_PRODUCT_INACTIVE = "판매 중단된 상품입니다."
ERROR_PRODUCT_SOLD_OUT = "품절된 상품입니다."
ERROR_NOT_ENOUGH_STOCK = "재고가 부족합니다 (남은 재고: {available_quantity}개)"
ERROR_INVALID_QUANTITY = "수량은 1개 이상이어야 합니다."
ERROR_ITEM_NOT_IN_CART = "장바구니 아이템을 찾을 수 없습니다."
ERROR_CART_EMPTY = "장바구니가 비어 있습니다."
ERROR_SLUG_TAKEN = "이미 사용 중인 슬러그입니다."

# Errors: orders
ERROR_ORDER_NOT_FOUND = "주문을 찾을 수 없습니다."
ERROR_ORDER_ITEM_NOT_FOUND = "주문 상품을 찾을 수 없습니다."
ERROR_ORDER_FORBIDDEN = "주문 조회 권한이 없습니다."
ERROR_ORDER_ITEMS_REQUIRED = "주문할 상품이 없습니다."
ERROR_INSUFFICIENT_STOCK = "재고가 부족합니다: {product_name}"
ERROR_SHIPPING_REQUIRED = "실물 상품이 포함된 주문은 배송 정보가 필요합니다."
ERROR_ORDER_NUMBER_EXHAUSTED = "주문 번호 생성에 실패했습니다."
ERROR_CANCEL_FORBIDDEN = "주문 취소 권한이 없습니다."
ERROR_ORDER_CANNOT_CANCEL = "입금대기 또는 입금확인 상태의 주문만 취소할 수 있습니다."
ERROR_INVALID_STATUS_TRANSITION = "주문 상태를 '{old_status}'에서 '{new_status}'(으)로 변경할 수 없습니다."
ERROR_INVALID_ITEM_STATUS_TRANSITION = "주문 상품 상태를 '{old_status}'에서 '{new_status}'(으)로 변경할 수 없습니다."

# Errors: digital delivery
ERROR_DOWNLOAD_FORBIDDEN = "다운로드 권한이 없습니다."
ERROR_DOWNLOAD_NOT_DIGITAL = "디지털 상품만 다운로드할 수 있습니다."
ERROR_DOWNLOAD_NOT_COMPLETED = "결제가 완료된 주문만 다운로드할 수 있습니다."
ERROR_DOWNLOAD_NO_FILE = "다운로드 가능한 파일이 없습니다."
ERROR_DOWNLOAD_LINK_INVALID = "다운로드 링크가 만료되었거나 올바르지 않습니다."

# Errors: shipments
ERROR_SHIPMENT_NOT_FOUND = "배송 정보를 찾을 수 없습니다."
ERROR_SHIPMENT_DIGITAL = "디지털 상품은 배송 정보를 생성할 수 없습니다."
ERROR_SHIPMENT_EXISTS = "이미 배송 정보가 등록된 상품입니다."
ERROR_SHIPMENT_FORBIDDEN = "배송 정보 조회 권한이 없습니다."

# Errors: sample generation
ERROR_SAMPLE_UNSUPPORTED = "지원하지 않는 파일 형식입니다. MP3, WAV, FLAC, M4A 형식 또는 ZIP 파일을 사용해주세요."
ERROR_SAMPLE_NO_AUDIO_IN_ZIP = "ZIP 파일 내에 오디오 파일이 없습니다. 샘플 파일을 별도로 업로드해주세요."
ERROR_SAMPLE_FAILED = "샘플 생성 중 오류가 발생했습니다. 샘플 파일을 별도로 업로드해주세요."
ERROR_SAMPLE_NOT_VOICE_PACK = "보이스팩 상품에만 샘플을 생성할 수 있습니다."
ERROR_LOG_NOT_FOUND = "로그를 찾을 수 없습니다."

# Success messages
SUCCESS_CART_UPDATED = "장바구니가 업데이트되었습니다."
SUCCESS_ITEM_REMOVED_FROM_CART = "장바구니에서 삭제되었습니다."
SUCCESS_CART_CLEARED = "장바구니를 비웠습니다."
SUCCESS_ORDER_CANCELLED = "주문 {order_number}이(가) 취소되었습니다."
SUCCESS_BULK_STATUS_UPDATED = "{count}개 주문의 상태가 변경되었습니다."

# Event log messages
LOG_ORDER_CREATED = "새로운 주문이 생성되었습니다"
LOG_ORDER_STATUS_CHANGED = "주문 상태가 '{old_status}'에서 '{new_status}'로 변경되었습니다"
LOG_ORDER_CANCELLED = "주문이 취소되었습니다"
LOG_ITEM_STATUS_CHANGED = "주문 상품 상태 변경: {old_status} → {new_status}"
LOG_DOWNLOAD = "디지털 상품 다운로드"
LOG_UNAUTHORIZED_DOWNLOAD = "권한 없는 디지털 상품 다운로드 시도"
LOG_SHIPMENT_CREATED = "배송 정보 생성"
LOG_SHIPMENT_UPDATED = "배송 정보 업데이트"
LOG_ADMIN_MEMO_UPDATED = "관리자 메모가 변경되었습니다"

DEFAULT_CANCEL_REASON = "고객 요청"

# Status labels shown in the admin console
ORDER_STATUS_LABELS = {
    "PENDING": "입금대기",
    "PAID": "입금확인",
    "MAKING": "제작중",
    "READY_TO_SHIP": "출고중",
    "SHIPPING": "배송중",
    "DONE": "완료",
    "CANCELLED": "취소",
}
