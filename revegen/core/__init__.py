"""
核心模块
包含配置、日志、异常、认证与HTTP传输
"""
