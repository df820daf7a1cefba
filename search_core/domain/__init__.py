"""领域层模型与异常。

包含：
- models: SearchRequest / InboundMessage / ExchangeResult 以及载荷形态。
- exceptions: 业务异常类型定义。
"""
