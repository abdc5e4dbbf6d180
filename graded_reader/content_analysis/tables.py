"""Static lookup tables used by the content analyzer.

Extending the analyzer means adding rows here; the scoring code only
iterates over these tables.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

DEFAULT_TAG = "科技"
MAX_TAGS = 5


@dataclass(frozen=True)
class GrammarPattern:
    """A complex construction and the score added per occurrence."""

    pattern: Pattern[str]
    weight: float
    label: str


@dataclass(frozen=True)
class TagRule:
    """Keyword pattern mapped to the tag it suggests."""

    pattern: Pattern[str]
    tag: str


COMMON_WORDS: Tuple[str, ...] = (
    "的", "是", "在", "有", "和", "了", "与", "也", "这", "个",
    "我", "你", "他", "她", "它", "们", "不", "很", "都", "还",
    "要", "可以", "能够", "应该", "需要", "时候", "地方", "人们", "社会", "国家",
    "发展", "技术", "系统", "服务", "产品", "市场", "用户", "数据", "信息", "内容",
    "方式", "问题", "解决", "提供", "支持", "使用", "工作", "学习", "生活",
)

COMPLEX_WORDS: Tuple[str, ...] = (
    "人工智能", "机器学习", "深度学习", "神经网络", "算法", "模型", "架构", "框架",
    "API", "接口", "数据库", "云计算", "区块链", "量子", "生物技术", "基因",
    "纳米", "芯片", "半导体", "处理器", "存储", "网络", "协议", "加密",
    "安全", "隐私", "认证", "授权", "监管", "合规", "策略", "战略",
    "创新", "颠覆", "转型", "升级", "优化", "整合", "融合", "协同",
    "生态", "平台", "终端", "设备", "硬件", "软件", "应用", "程序",
    "代码", "开发", "测试", "部署", "运维", "监控", "分析", "统计",
    "可视化", "自动化", "智能化", "数字化",
)

GRAMMAR_PATTERNS: Tuple[GrammarPattern, ...] = (
    GrammarPattern(re.compile(r"[，、；]"), 0.5, "clause punctuation"),
    GrammarPattern(re.compile(r"虽然.*但是"), 0.5, "contrastive"),
    GrammarPattern(re.compile(r"不仅.*而且"), 0.5, "progressive"),
    GrammarPattern(re.compile(r"如果.*那么"), 0.5, "conditional"),
    GrammarPattern(re.compile(r"由于.*因此"), 0.5, "causal"),
    GrammarPattern(re.compile(r".*的.*的.*的"), 0.5, "stacked attributives"),
    GrammarPattern(re.compile(r"被.*了"), 0.5, "passive"),
    GrammarPattern(re.compile(r".*使得.*"), 0.5, "causative"),
    GrammarPattern(re.compile(r"通过.*实现"), 0.5, "means"),
    GrammarPattern(re.compile(r"随着.*的.*发展"), 0.5, "accompanying"),
)

TAG_RULES: Tuple[TagRule, ...] = (
    TagRule(re.compile(r"人工智能|AI|机器学习|深度学习"), "人工智能"),
    TagRule(re.compile(r"苹果|iPhone|iOS|Mac|iPad"), "苹果"),
    TagRule(re.compile(r"微软|Windows|Azure|Office"), "微软"),
    TagRule(re.compile(r"特斯拉|电动车|自动驾驶"), "特斯拉"),
    TagRule(re.compile(r"字节跳动|抖音|TikTok"), "字节跳动"),
    TagRule(re.compile(r"腾讯|微信|QQ"), "腾讯"),
    TagRule(re.compile(r"阿里巴巴|淘宝|支付宝"), "阿里巴巴"),
    TagRule(re.compile(r"百度|搜索|地图"), "百度"),
    TagRule(re.compile(r"华为|鸿蒙|手机"), "华为"),
    TagRule(re.compile(r"小米|雷军|MIUI"), "小米"),
    TagRule(re.compile(r"芯片|半导体|处理器"), "硬件"),
    TagRule(re.compile(r"云计算|云服务|服务器"), "云计算"),
    TagRule(re.compile(r"区块链|比特币|加密货币"), "区块链"),
    TagRule(re.compile(r"元宇宙|VR|AR|虚拟现实"), "元宇宙"),
    TagRule(re.compile(r"5G|6G|通信|网络"), "通信"),
    TagRule(re.compile(r"新能源|电池|充电"), "新能源"),
    TagRule(re.compile(r"机器人|自动化|智能制造"), "机器人"),
    TagRule(re.compile(r"生物技术|基因|医疗"), "生物技术"),
    TagRule(re.compile(r"量子|量子计算|量子通信"), "量子科技"),
    TagRule(re.compile(r"游戏|电竞|娱乐"), "游戏"),
)
