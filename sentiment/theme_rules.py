"""
Static theme and keyword dictionaries.
Immutable configuration built once at import and shared by reference.

Tokens mix Chinese and Latin scripts and are matched as case-folded
substrings, so short tokens such as 'AI' or 'VN' intentionally hit inside
longer words.
"""

import re
from types import MappingProxyType
from typing import Mapping, Pattern, Tuple


HK_TECH = 'HK Tech'
CHINA_HARD_TECH = 'China Hard Tech'
GLOBAL_GROWTH_US = 'Global Growth & US'
VIETNAM_SEA = 'Vietnam & SE Asia'
JAPAN = 'Japan'
HEALTHCARE = 'Healthcare'
NEW_ENERGY = 'New Energy'
ENERGY = 'Energy'
FINANCIALS = 'Financials'

# Risk grading bucket for positions no theme recognizes
UNIDENTIFIED_THEME = 'Unidentified'

# Keyword planning falls back to broad US/global coverage
FALLBACK_PLAN_THEME = GLOBAL_GROWTH_US


# Dictionary order is the order themes are reported in
THEME_TOKENS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    HK_TECH: (
        '恒生科技', '恒科', '港股科技', '港股互联网', '港股通互联网',
        '恒生互联网', '中概互联网', 'KWEB',
        '腾讯', '阿里', '美团', '京东', '快手', '哔哩哔哩',
        'BABA', 'TCEHY', 'JD', 'MEITUAN',
        '恒生港股通', '港股通中国科技', '中国科技ETF',
    ),
    CHINA_HARD_TECH: (
        '科创50', '科创板', '科创', '硬科技',
        '半导体', '芯片', '算力', 'AI', '人工智能',
        '服务器', '光模块', '国产替代', 'GPU',
        '英伟达', 'NVIDIA', 'NVDA',
        'SMH', 'SOXX',
    ),
    GLOBAL_GROWTH_US: (
        '全球成长', '全球精选', '纳指', 'NASDAQ', '美股', '标普', 'S&P',
        'SPY', 'QQQ', 'VUG', 'IVV',
        '降息', '非农', 'CPI', 'PCE', '美联储', 'Powell', '收益率', '债券',
    ),
    VIETNAM_SEA: ('越南', 'VN', '胡志明', '东南亚', '新兴市场', 'VNM'),
    JAPAN: ('日本', '日经', '东证', '日股', 'EWJ'),
    HEALTHCARE: (
        '医药', '创新药', '医疗', '医保', '药企', '生物科技', 'CXO',
        '疫苗', '集采', 'XLV', 'XBI',
    ),
    NEW_ENERGY: ('新能源', '光伏', '储能', '锂电', '电池', '风电', '电动车', '充电桩'),
    ENERGY: ('油气', '原油', '天然气', 'OPEC', '布油', 'WTI', '能源股', 'XLE'),
    FINANCIALS: ('银行', '证券', '保险', 'XLF'),
})

# Lowercased once so matching only folds the text side
THEME_TOKENS_FOLDED: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    theme: tuple(token.lower() for token in tokens)
    for theme, tokens in THEME_TOKENS.items()
})


MACRO_KEYWORDS: Tuple[str, ...] = (
    '美联储',
    '通胀 CPI',
    'A股 市场',
    '港股 恒生指数',
    '人民币 汇率',
)

THEME_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    HK_TECH: ('恒生科技', '港股互联网', '腾讯', '阿里巴巴', '美团', '中概股'),
    CHINA_HARD_TECH: ('半导体', '芯片', '人工智能', '算力', '英伟达', '科创50'),
    GLOBAL_GROWTH_US: ('纳斯达克', '标普500', '美联储', '美债收益率', '非农', '美股'),
    VIETNAM_SEA: ('越南股市', '东南亚 经济', '新兴市场'),
    JAPAN: ('日经225', '日本央行', '日元'),
    HEALTHCARE: ('创新药', '医药', '医保 集采', 'CXO'),
    NEW_ENERGY: ('光伏', '储能', '锂电池', '新能源车'),
    ENERGY: ('原油', 'OPEC', '天然气'),
    FINANCIALS: ('银行', '券商', '保险'),
})

# Low-signal keywords whose contributions are discounted x0.25
BROAD_KEYWORDS: frozenset = frozenset(
    k.lower() for k in ('美股', 'A股 市场', '医药', '银行', '保险', '新兴市场', '芯片')
)

# Precision patterns on "{name} {code}" -> instrument-specific search terms
INSTRUMENT_PATTERNS: Tuple[Tuple[Pattern, str], ...] = (
    (re.compile(r'纳斯达克|纳指|NASDAQ|\bQQQ\b', re.I), '纳斯达克100'),
    (re.compile(r'标普|S&P|\bSPY\b|\bIVV\b', re.I), '标普500'),
    (re.compile(r'恒生科技|恒科'), '恒生科技指数'),
    (re.compile(r'科创50'), '科创50'),
    (re.compile(r'越南|\bVNM\b', re.I), '越南股市'),
    (re.compile(r'日经|\bEWJ\b', re.I), '日经225'),
    (re.compile(r'英伟达|NVIDIA|\bNVDA\b', re.I), '英伟达'),
    (re.compile(r'半导体|\bSMH\b|\bSOXX\b', re.I), '半导体 指数'),
)


FINANCE_SIGNAL_PATTERN: Pattern = re.compile(
    r'财报|业绩|营收|利润|降息|加息|央行|指数|股价|涨停|跌停|ETF|基金|净值'
    r'|earnings|revenue|guidance|\bfed\b|rate cut|\bipo\b',
    re.I
)

TABLOID_PATTERN: Pattern = re.compile(
    r'八卦|明星|绯闻|综艺|恋情|网红|离婚|celebrity|gossip',
    re.I
)

BULLISH_WORDS: Tuple[str, ...] = (
    '上涨', '大涨', '涨停', '反弹', '创新高', '利好', '增长', '突破',
    '超预期', '回升', 'surge', 'rally', 'beat', 'upgrade', 'record high',
)

BEARISH_WORDS: Tuple[str, ...] = (
    '下跌', '大跌', '跌停', '暴跌', '利空', '下滑', '亏损', '新低',
    '不及预期', '回落', 'plunge', 'slump', 'miss', 'downgrade', 'selloff',
)
