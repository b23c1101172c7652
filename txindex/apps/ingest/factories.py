import factory
from factory.django import DjangoModelFactory

from .models import LoggedTransaction
from .types import Block, Transaction


class TransactionFactory(factory.Factory):
    class Meta:
        model = Transaction

    signature = factory.Sequence(lambda n: f"sig{n}")
    kind = "txfer"
    sender = factory.Sequence(lambda n: 1000 + n)
    recipient = factory.Sequence(lambda n: 2000 + n)
    amount = 100


class BlockFactory(factory.Factory):
    class Meta:
        model = Block

    round = factory.Sequence(lambda n: n + 1)
    transactions = ()


class LoggedTransactionFactory(DjangoModelFactory):
    class Meta:
        model = LoggedTransaction
        django_get_or_create = ("signature",)

    signature = factory.Sequence(lambda n: f"logged-sig{n}")
    kind = "txfer"
    sender = 1
    recipient = 2
    amount = factory.Sequence(lambda n: (n + 1) * 10)
