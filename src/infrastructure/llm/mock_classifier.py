import json

from src.application.ports import ImageClassifierPort
from src.domain.models import UploadedImage


SAMPLE_ANALYSIS = {
    "presence": "found",
    "location": "鼻孔内缘，左侧鼻翼附近",
    "color_analysis": {
        "hex": "#E8D9A0",
        "rgb": "rgb(232, 217, 160)",
        "description": "淡黄色，略显粘稠",
        "transparency": "微混",
        "viscosity": "中等",
        "volume": "少量",
    },
    "western_medicine": {
        "condition": "轻度鼻腔感染（示例结果）",
        "pathology_basis": "鼻腔黏膜轻度炎症，分泌物增多",
        "recommendations": [
            "0.9%盐水冲洗，每日2次，每次10ml",
            "多饮水，观察症状变化",
        ],
    },
    "tcm": {
        "syndrome": "风热犯肺证",
        "differentiation": "涕黄质稠",
        "recommendations": ["按摩迎香穴，每次3分钟，每日2次"],
    },
}


class MockImageClassifierAdapter(ImageClassifierPort):
    """Returns a canned answer so the page works without an API key."""

    def classify_image(self, image: UploadedImage, prompt: str) -> str:
        return json.dumps(SAMPLE_ANALYSIS, ensure_ascii=False)
