# crosspost/models/social/channel.py

from ..base_model import BaseModel


class Channel(BaseModel):
    """
    Owning workspace of posts and accounts. Notification targets:

      webhook_discord:  {"url"}
      webhook_telegram: {"bot_token", "chat_id"}
      webhook_slack:    {"url"}
      webhook_custom:   {"url"}
      webhook_events:   ["post.published"]   (empty = all)
    """

    collection_name = "channels"

    @classmethod
    def get_by_id(cls, channel_id):
        oid = cls.to_object_id(channel_id)
        if oid is None:
            return None
        return cls.normalise(cls.get_collection().find_one({"_id": oid}))
