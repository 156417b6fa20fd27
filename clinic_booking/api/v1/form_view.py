from __future__ import annotations

from clinic_booking.api.v1.schemas import (
    FieldViewSchema,
    FormViewSchema,
    NavigationSchema,
    OptionSchema,
    StepSchema,
)
from clinic_booking.domain.entities.form_snapshot import FormSnapshot


def build_form_view(
    session_id: str,
    snapshot: FormSnapshot,
    flash_success: str | None = None,
    flash_error: str | None = None,
) -> FormViewSchema:
    """
    Pure view model of a form snapshot. Flash messages come in as arguments;
    a controller error takes precedence over a flashed one.
    """
    chain = sorted((view for view in snapshot.fields if view.step is not None), key=lambda view: view.step)
    steps = [
        StepSchema(
            index=index,
            label=view.label,
            reached=snapshot.current_step >= index,
            current=snapshot.current_step == index,
        )
        for index, view in enumerate(chain)
    ]
    fields = [
        FieldViewSchema(
            name=view.name,
            label=view.label,
            kind=view.kind,
            required=view.required,
            value=view.value,
            status=view.status,
            options=[OptionSchema(value=o.value, label=o.label, detail=dict(o.detail)) for o in view.options],
            loading=view.loading,
            disabled=view.locked or view.loading or snapshot.submitting,
            error=view.error,
        )
        for view in snapshot.fields
    ]
    navigation = None
    if snapshot.last_navigation is not None:
        nav = snapshot.last_navigation
        navigation = NavigationSchema(route=nav.route, params=dict(nav.params), flash=nav.flash)

    return FormViewSchema(
        session_id=session_id,
        form=snapshot.form,
        steps=steps,
        current_step=snapshot.current_step,
        fields=fields,
        submitting=snapshot.submitting,
        can_submit=not snapshot.submitting and not any(view.loading for view in snapshot.fields),
        banner=snapshot.general_error or flash_error,
        flash=navigation.flash if navigation and navigation.flash else flash_success,
        navigation=navigation,
    )
