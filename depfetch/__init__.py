"""depfetch - Git 来源依赖包解析与本地缓存"""

__version__ = "0.3.0"
