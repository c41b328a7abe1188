import logging

from src.application.normalizer import normalize
from src.application.ports import ImageClassifierPort
from src.domain.models import DiagnosticRecord, UploadedImage


logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = """
你是中西医结合的耳鼻喉专家，请对上传的鼻部图像进行分析，判断是否存在鼻涕，并给出中西医联合护理建议。

【步骤1：是否存在鼻涕】
- 判断图像中是否存在鼻腔分泌物（鼻涕）
- 若存在，请指出其图像中位置（用自然语言描述位置，如“鼻翼左侧”“鼻腔外溢”等）

【步骤2：鼻涕颜色与状态分析】
- 精确识别鼻涕颜色（十六进制色码+RGB）
- 判断透明度/粘稠度/是否带血/是否含杂质
- 估计其体积（如“少量涕迹”“大量浓涕”）

【步骤3：中西医联合诊断】
请基于以下医学标准进行诊断：

【西医依据】
- 《中国慢性鼻窦炎诊疗指南(2018)》
- 涕液细胞学与微生物学标准
- 常见感染分类（病毒/细菌/真菌/过敏）

【中医依据】
- 《中医耳鼻喉科学》辨证理论
- “肺开窍于鼻、涕为肺液” + 六淫病机
- 徐荣谦辨涕三纲法

【步骤4：生成护理建议】
- 给出中/西医护理方案
- 每条建议必须包含：剂量/方法/频率/风险提示

【输出要求】
请返回以下结构化 JSON：

{
  "presence": "found" | "not_found",
  "location": "若存在，描述具体图像中位置，如“鼻孔内缘，左侧鼻翼附近”",
  "color_analysis": {
    "hex": "#xxxxxx",
    "rgb": "rgb(x, x, x)",
    "description": "如“粘稠黄色，伴有絮状物”",
    "transparency": "清澈 / 微混 / 浑浊",
    "viscosity": "稀 / 中等 / 稠厚",
    "volume": "少量 / 中量 / 大量"
  },
  "western_medicine": {
    "condition": "如‘急性细菌性鼻窦炎’",
    "pathology_basis": "如‘中性粒细胞>75%+肺炎链球菌阳性’",
    "recommendations": [
      "0.9%盐水冲洗，每日3次，每次10ml",
      "口服阿莫西林7天"
    ]
  },
  "tcm": {
    "syndrome": "如‘风热犯肺证’",
    "differentiation": "如‘舌红苔黄，脉浮数’",
    "recommendations": [
      "桑菊饮加减：桑叶6g，菊花9g...",
      "按摩迎香穴、印堂穴，每次3分钟，每日2次"
    ]
  }
}

【特殊说明】
- 若未识别出鼻涕，请设置 "presence": "not_found"，并省略后续诊断项
- 禁止输出任何解释性文字或 Markdown 格式，仅输出纯 JSON
- 所有中药方案必须注明精确克数，建议“水煎 400ml，分2次服”
- 鼻涕位置为图像层级自然语言描述，支持配合前端高亮标注
"""


class ImageAnalysisUseCase:
    def __init__(self, classifier: ImageClassifierPort, prompt: str = ANALYSIS_PROMPT):
        self.classifier = classifier
        self.prompt = prompt

    def analyze(self, image: UploadedImage) -> DiagnosticRecord:
        logger.info("Analyzing image %s (%s, %d bytes)", image.filename, image.mime_type, len(image.data))
        raw = self.classifier.classify_image(image, self.prompt)
        record = normalize(raw)
        logger.info("Analysis finished: presence=%s condition=%s", record.presence.value, record.condition)
        return record
