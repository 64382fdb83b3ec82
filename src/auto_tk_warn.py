from datetime import timedelta

import humanize

from tkwarn import Plugin

REMINDER_DELAY = 30
KICK_DELAY = 60
KICK_REASON = "no apology after teamkill"

DEFAULT_APOLOGY_KEYWORDS = ["sorry", "sry", "apologies", "my bad", "forgive me"]


class PendingApology:
    def __init__(self, steam_id):
        self.steam_id = steam_id
        self.reminder_handle = None
        self.kick_handle = None

    def cancel(self):
        if self.reminder_handle is not None:
            self.reminder_handle.cancel()
        if self.kick_handle is not None:
            self.kick_handle.cancel()


def steam_id_of(participant):
    if not participant:
        return None

    return participant.get("steamID")


# noinspection PyPep8Naming
class auto_tk_warn(Plugin):
    """
    Warns players when they teamkill. If they do not apologize in all chat within 60 seconds, they get kicked.

    Options:
    * attackerMessage (default: "Please apologise for ALL TKs in ALL chat!") message for the attacking player, no
    warning and no kick happens when unset or empty.
    * reminderMessage (default: "You have 30 seconds left to apologize for the teamkill!") reminder sent 30 seconds
    after the teamkill.
    * victimMessage (default: None) message for the killed player, nothing is sent when unset or empty.
    * apologyKeywords (default: "sorry, sry, apologies, my bad, forgive me") case-insensitive phrases accepted as
    apology.
    * thankYouMessage (default: "Thank you for apologizing.") message after an accepted apology.
    """

    description = (
        "Automatically warns players with a message when they teamkill. "
        "If they do not apologize in all chat within 60 seconds, they will be kicked."
    )
    default_enabled = True

    options_specification = {
        "attackerMessage": {
            "required": False,
            "description": "The message to warn attacking players with.",
            "default": "Please apologise for ALL TKs in ALL chat!",
        },
        "reminderMessage": {
            "required": False,
            "description": "The reminder message to warn attacking players with after 30 seconds.",
            "default": "You have 30 seconds left to apologize for the teamkill!",
        },
        "victimMessage": {
            "required": False,
            "description": "The message that will be sent to the victim.",
            "default": None,
        },
        "apologyKeywords": {
            "required": False,
            "description": "The keywords that will be accepted as an apology.",
            "default": DEFAULT_APOLOGY_KEYWORDS,
        },
        "thankYouMessage": {
            "required": False,
            "description": "The message to thank the player after they apologize.",
            "default": "Thank you for apologizing.",
        },
    }

    def __init__(self, server, options=None, error_handler=None):
        super().__init__(server, options, error_handler)

        self.attacker_message = self.get_option("attackerMessage")
        self.reminder_message = self.get_option("reminderMessage")
        self.victim_message = self.get_option("victimMessage")
        self.apology_keywords = [
            keyword.lower() for keyword in self.get_option("apologyKeywords", list) or DEFAULT_APOLOGY_KEYWORDS
        ]
        self.thank_you_message = self.get_option("thankYouMessage")

        self.pending_apologies = {}

    @property
    def pending(self):
        return self.pending_apologies.copy()

    def mount(self):
        self.add_hook("teamkill", self.handle_teamkill)
        self.add_hook("chat_message", self.handle_chat_message)
        self.logger.info("auto_tk_warn plugin mounted.")

    def unmount(self):
        super().unmount()

        for pending in self.pending_apologies.values():
            pending.cancel()
        if len(self.pending_apologies) > 0:
            self.logger.info(f"Dropped {len(self.pending_apologies)} pending apologies.")
        self.pending_apologies.clear()

        self.logger.info("auto_tk_warn plugin unmounted.")

    def handle_teamkill(self, info):
        self.logger.debug(f"Teamkill event detected: {info}")

        attacker_steam_id = steam_id_of(info.get("attacker"))
        if attacker_steam_id and self.attacker_message:
            self.warn(attacker_steam_id, self.attacker_message)
            self.track_apology(attacker_steam_id)

        victim_steam_id = steam_id_of(info.get("victim"))
        if victim_steam_id and self.victim_message:
            self.warn(victim_steam_id, self.victim_message)

    def track_apology(self, steam_id):
        pending = PendingApology(steam_id)
        pending.reminder_handle = self.call_later(REMINDER_DELAY, self.remind, pending)
        pending.kick_handle = self.call_later(KICK_DELAY, self.kick_unapologetic, pending)

        self.pending_apologies[steam_id] = pending
        self.logger.info(
            f"Pending apology for player {steam_id} set, "
            f"kicking in {humanize.naturaldelta(timedelta(seconds=KICK_DELAY))}."
        )

    def is_still_pending(self, pending):
        return self.pending_apologies.get(pending.steam_id) is pending

    def remind(self, pending):
        if not self.is_still_pending(pending):
            return

        self.warn(pending.steam_id, self.reminder_message)
        self.logger.info(f"Reminder sent to player {pending.steam_id} to apologize.")

    def kick_unapologetic(self, pending):
        if not self.is_still_pending(pending):
            return

        del self.pending_apologies[pending.steam_id]
        self.kick(pending.steam_id, KICK_REASON)
        self.logger.info(f"Player {pending.steam_id} was kicked for not apologizing.")

    def is_apology(self, message):
        if not message:
            return False

        lowered = message.lower()
        return any(keyword in lowered for keyword in self.apology_keywords)

    def handle_chat_message(self, info):
        steam_id = info.get("steamID")
        if not self.is_apology(info.get("message")):
            return

        if steam_id not in self.pending_apologies:
            return

        pending = self.pending_apologies.pop(steam_id)
        pending.cancel()
        self.warn(steam_id, self.thank_you_message)
        self.logger.info(f"Player {steam_id} apologized and was not kicked. Thank you message sent.")
