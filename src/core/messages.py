from src.config import settings

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "no_images": "at least one image must be uploaded",
        "malformed_prompts": "invalid prompt list format",
        "no_credentials": "no API key found, configure one in .env or supply it with the request",
        "upload_failed": "unable to upload file to the generation service",
        "generation_failed": "unable to generate a description for this image",
        "unexpected_error": "an unexpected error occurred",
        "default_prompt": "Describe the details of this image",
    },
    "th": {
        "no_images": "ต้องอัปโหลดรูปอย่างน้อย 1 รูป",
        "malformed_prompts": "รูปแบบข้อมูล prompt ไม่ถูกต้อง",
        "no_credentials": "ไม่พบ API key กรุณากำหนดใน .env หรือฟอร์ม",
        "upload_failed": "ไม่สามารถอัปโหลดไฟล์ไปยัง Gemini ได้",
        "generation_failed": "ไม่สามารถสร้างคำบรรยายของภาพนี้ได้",
        "unexpected_error": "เกิดข้อผิดพลาด",
        "default_prompt": "บรรยายรายละเอียดของภาพนี้",
    },
}

FALLBACK_LOCALE = "en"


def message(key: str) -> str:
    catalog = MESSAGES.get(settings.locale, MESSAGES[FALLBACK_LOCALE])
    return catalog.get(key) or MESSAGES[FALLBACK_LOCALE][key]
