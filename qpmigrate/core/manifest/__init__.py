"""qpm 清单模型与 v1 -> v2 转换

- models_v1.py: qpm.json 数据模型 + 必填字段校验
- models_v2.py: qpm2.json 数据模型 + 有序序列化
- converter.py: 纯函数转换
"""

from qpmigrate.core.manifest.converter import convert
from qpmigrate.core.manifest.models_v1 import CompileOptions, DependencyV1, ManifestV1
from qpmigrate.core.manifest.models_v2 import DependencySpec, ManifestV2, Triplet

__all__ = [
    "CompileOptions",
    "DependencySpec",
    "DependencyV1",
    "ManifestV1",
    "ManifestV2",
    "Triplet",
    "convert",
]
