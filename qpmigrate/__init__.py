"""qpmigrate - qpm 包清单 v1 -> v2 迁移工具"""

__version__ = "0.1.0"
