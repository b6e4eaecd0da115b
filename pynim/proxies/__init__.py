from .channel import Channel
from .model_proxy import ModelProxy
from .view_proxy import ViewProxy
