"""SplitInvoice Use Case

Partitions an unpaid invoice into independently payable child invoices.
"""

import logging
from sqlalchemy.exc import SQLAlchemyError
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.clock import Clock
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.partner_share_repository import PartnerShareRepository
from src.domain.currency import CurrencyConverter
from src.domain.errors import BillingError, InfrastructureError, InvoiceNotFoundError
from src.domain.invoice import InvoiceKind
from src.domain.invoice_split import ensure_splittable, plan_split
from src.domain.invoice_status import derive_parent_status, display_status
from src.domain.partner_share import PartnerShare
from .dtos import InvoiceResponseDTO, SplitInvoiceCommandDTO, SplitInvoiceResponseDTO

logger = logging.getLogger(__name__)


class SplitInvoice:
    """
    Use Case: Split an invoice into child invoices

    Business Rules:
    1. Only standalone invoices with no recorded payments can be split
    2. At least two allocations; amounts must add up to the parent amount exactly
    3. Children inherit client, matter, currencies and the frozen rate;
       numbers are <parent-number>-<sequence>
    4. Partner shares already allocated on the parent are copied to each child
    5. Parent becomes a split parent and stops accepting payments
    6. Parent row is locked (SELECT FOR UPDATE) for the whole operation

    Flow:
    1. Lock parent invoice
    2. Re-read ledger total and check the parent is splittable
    3. Plan and persist children
    4. Copy partner shares
    5. Mark parent as split
    6. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        share_repo: PartnerShareRepository,
        converter: CurrencyConverter,
        clock: Clock,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.share_repo = share_repo
        self.converter = converter
        self.clock = clock

    async def execute(self, command: SplitInvoiceCommandDTO) -> SplitInvoiceResponseDTO:
        """
        Execute invoice split

        Args:
            command: SplitInvoiceCommandDTO with parent ID and allocations

        Returns:
            SplitInvoiceResponseDTO with the updated parent and the children

        Raises:
            InvoiceNotFoundError, ValidationError, InvalidSplitStateError,
            SplitAmountMismatchError, InfrastructureError
        """
        try:
            # Step 1: Lock parent
            parent = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if not parent:
                raise InvoiceNotFoundError(command.invoice_id)

            # Step 2: Splittable?
            total_paid = await self.payment_repo.get_total_paid(parent.id)
            ensure_splittable(parent, total_paid)

            # Step 3: Children
            children = plan_split(parent, command.allocations, self.converter)
            created_children = await self.invoice_repo.create_many(children)

            # Step 4: Partner shares follow the children
            parent_shares = await self.share_repo.list_by_invoice(parent.id)
            if parent_shares:
                for child in created_children:
                    await self.share_repo.replace_for_invoice(
                        child.id,
                        [
                            PartnerShare(
                                invoice_id=child.id,
                                partner_id=share.partner_id,
                                share_percentage=share.share_percentage,
                            )
                            for share in parent_shares
                        ],
                    )

            # Step 5: Parent becomes a split parent
            parent.kind = InvoiceKind.SPLIT_PARENT
            updated_parent = await self.invoice_repo.update(parent)

            # Step 6: Commit
            await self.uow.commit()

            logger.info(
                f"Split invoice {updated_parent.invoice_number} ({updated_parent.invoice_amount} "
                f"{updated_parent.invoice_currency}) into "
                f"{', '.join(f'{c.invoice_number}={c.invoice_amount}' for c in created_children)}"
            )

            today = self.clock.today()
            return SplitInvoiceResponseDTO(
                parent=InvoiceResponseDTO.from_entity(
                    updated_parent, derive_parent_status(created_children, today)
                ),
                children=[
                    InvoiceResponseDTO.from_entity(child, display_status(child, today))
                    for child in created_children
                ],
            )

        except BillingError as e:
            await self.uow.rollback()
            logger.warning(f"Split of invoice {command.invoice_id} rejected: {e.code}: {e.message}")
            raise
        except SQLAlchemyError as e:
            await self.uow.rollback()
            logger.error(f"Failed to split invoice {command.invoice_id}: {e}")
            raise InfrastructureError(
                "Failed to split invoice", invoice_id=command.invoice_id, reason=str(e)
            ) from e
