"""自定义异常类定义"""

class ImageConverterError(Exception):
    """基础异常类"""
    pass

class ConfigError(ImageConverterError):
    """配置相关错误"""
    pass

class DecodeError(ImageConverterError):
    """输入字节无法解码为图片"""
    pass

class EncodeError(ImageConverterError):
    """目标图片无法编码为指定格式"""
    pass

class MetadataError(ImageConverterError):
    """元数据解析/写入错误（非致命）"""
    pass

class ArchiveError(ImageConverterError):
    """压缩包打包错误"""
    pass

class RemoteNameError(ImageConverterError):
    """AI命名请求失败"""
    pass

class FileOperationError(ImageConverterError):
    """文件操作相关错误"""
    pass
