"""
日志消息模板模块
统一管理所有业务日志消息模板，便于维护和国际化
"""

from typing import Dict, Any


class LogMessages:
    """日志消息模板类"""

    # ==================== 通用日志消息 ====================
    START_OPERATION = "开始执行操作: {operation_name}"
    OPERATION_SUCCESS = "操作成功完成: {operation_name}"
    OPERATION_FAILED = "操作执行失败: {operation_name}"

    # ==================== 请求传输相关 ====================
    REQUEST_SENT = "发送请求: {method} {url}"
    RESPONSE_RECEIVED = "收到响应: {status_code} {url}"
    REQUEST_RETRY = "请求失败，准备重试 ({attempt}/{max_retries})"
    TOKEN_INVALIDATED = "认证令牌已失效，已清除缓存令牌"

    # ==================== 项目相关 ====================
    PROJECT_RESOLVED = "已获取项目ID: {project_id}"

    # ==================== 提示词增强相关 ====================
    ENHANCE_START = "开始增强提示词，请求{num_variants}个变体"
    ENHANCE_SUCCESS = "提示词增强成功，生成{variant_count}个变体"
    ENHANCE_FALLBACK = "提示词增强失败，使用原始提示词"

    # ==================== 任务提交相关 ====================
    JOB_SUBMITTED = "生成任务已提交: {job_id}"

    # ==================== 轮询相关 ====================
    POLL_ATTEMPT = "轮询生成状态 ({attempt}/{max_attempts})"
    POLL_PENDING = "生成任务处理中: {job_id}"
    POLL_NOT_FOUND = "节点列表中暂未找到生成任务: {job_id}"
    POLL_COMPLETED = "生成任务完成，图片ID: {image_id}"
    POLL_FETCH_RETRY = "获取图片内容失败，稍后重试: {job_id}"
    POLL_FAILED = "生成任务失败: {job_id}"
    POLL_TIMEOUT = "生成任务轮询超时: {job_id}"

    # ==================== 批量生成相关 ====================
    BATCH_START = "开始批量生成图片，数量: {batch_size}"
    BATCH_SUCCESS = "批量生成完成，共{image_count}张图片"
    BATCH_FAILED = "批量生成失败，已取消{cancelled}个任务"


    @classmethod
    def format_message(cls, message_template: str, **kwargs: Any) -> str:
        """格式化日志消息模板"""
        return message_template.format(**kwargs)

    @classmethod
    def get_structured_data(cls, **kwargs: Any) -> Dict[str, Any]:
        """获取结构化日志数据"""
        return kwargs


# 全局实例
log_messages = LogMessages()
