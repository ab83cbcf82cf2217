from sqlalchemy import BigInteger, Column, Integer, SmallInteger, String

from premium_service.db.base import Base


class Guild(Base):
    __tablename__ = "guilds"

    guild_id = Column(BigInteger, primary_key=True, autoincrement=False)
    guild_name = Column(String, nullable=True)
    premium = Column(SmallInteger, nullable=False, default=0)
    tx_time_unix = Column(Integer, nullable=True)

    # Premium links. transferred_to: this guild gave its premium away.
    # inherits_from: this guild borrows premium from another guild.
    transferred_to = Column(BigInteger, nullable=True, index=True)
    inherits_from = Column(BigInteger, nullable=True, index=True)
