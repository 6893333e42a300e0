"""
提示词增强单元测试
"""

import pytest

from revegen.services.generation.prompt_enhancer import (
    EnhancementResult,
    EnhancementStatus,
    PromptEnhancer,
    extract_variants,
)
from tests.utils.fake_service import PROJECT_ID


@pytest.mark.unit
@pytest.mark.generation
class TestExtractVariants:
    """测试从推理响应中提取变体"""

    def test_last_snapshot_is_authoritative(self):
        """测试只读取最后一个快照"""
        payload = [
            {"status": "success", "outputs": {"expanded_prompts": ["stale"]}},
            {"status": "success", "outputs": {"expanded_prompts": ["a", "b"]}},
        ]
        assert extract_variants(payload) == ["a", "b"]

    def test_last_snapshot_not_success(self):
        """测试最后一个快照未成功时视为失败"""
        payload = [
            {"status": "success", "outputs": {"expanded_prompts": ["a"]}},
            {"status": "running", "outputs": {}},
        ]
        assert extract_variants(payload) is None

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {"status": "success"},
        [{"status": "success"}],
        [{"status": "success", "outputs": {"expanded_prompts": []}}],
        [{"status": "success", "outputs": {"expanded_prompts": "a"}}],
    ])
    def test_malformed_payloads(self, payload):
        """测试各种格式不符的响应"""
        assert extract_variants(payload) is None


@pytest.mark.unit
@pytest.mark.generation
class TestPromptEnhancer:
    """PromptEnhancer 单元测试类"""

    @pytest.fixture
    def enhancer(self, transport, project_resolver, test_settings):
        return PromptEnhancer(transport, project_resolver, test_settings.enhancer_model_id)

    @pytest.mark.asyncio
    async def test_enhance_success(self, enhancer, fake_service, test_settings):
        """测试成功获取变体"""
        fake_service.enhance_variants = ["a red cat", "a blue cat"]

        result = await enhancer.enhance("a cat", 2)

        assert result.status is EnhancementStatus.ENHANCED
        assert result.prompts == ["a red cat", "a blue cat"]
        assert result.is_fallback is False
        assert fake_service.enhance_calls == [{
            "inputs": {"num_variants": 2, "prompt": "a cat"},
            "model_id": test_settings.enhancer_model_id,
            "project_id": PROJECT_ID,
        }]

    @pytest.mark.asyncio
    async def test_enhance_fallback_on_api_error(self, enhancer, fake_service):
        """测试接口失败时回退为原始提示词"""
        fake_service.enhance_variants = None

        result = await enhancer.enhance("a cat", 3)

        assert result.is_fallback is True
        assert result.prompts == ["a cat"]
        assert result.reason

    @pytest.mark.asyncio
    async def test_enhance_fallback_on_unsuccessful_status(self, enhancer, fake_service):
        """测试最终快照状态不是 success 时回退"""
        fake_service.enhance_variants = ["ignored"]
        fake_service.enhance_status = "failed"

        result = await enhancer.enhance("a cat", 1)

        assert result == EnhancementResult.fallback("a cat", "no successful enhancement result")

    @pytest.mark.asyncio
    async def test_fewer_variants_than_requested(self, enhancer, fake_service):
        """测试服务端返回的变体数少于请求数"""
        fake_service.enhance_variants = ["only one"]

        result = await enhancer.enhance("a cat", 4)

        assert result.prompts == ["only one"]
        assert result.is_fallback is False

    @pytest.mark.asyncio
    async def test_enhance_fallback_on_decoding_error(self, enhancer, fake_service):
        """测试响应无法解码时同样回退"""
        fake_service.enhance_variants = ["a red cat"]
        fake_service.broken_paths = ["/api/misc/model_infer_sync"]

        result = await enhancer.enhance("a cat", 2)

        assert result.is_fallback is True
        assert result.prompts == ["a cat"]
        assert "bad gzip" in result.reason
