"""
Yes/no observation questions, one per trait tag
"""
import random
from dataclasses import dataclass
from typing import List, Literal, Optional

Perspective = Literal["first", "third"]


@dataclass(frozen=True)
class Question:
    """A trait question phrased about oneself and about another person"""
    trait: str
    first_person: str
    third_person: str

    def text(self, perspective: Perspective = "first") -> str:
        return self.third_person if perspective == "third" else self.first_person


QUESTION_BANK: List[Question] = [
    Question(
        "xenoglossia",
        "Começa a falar línguas que nunca aprendeu",
        "A pessoa começa a falar línguas que nunca aprendeu?",
    ),
    Question(
        "aversion_symbols",
        "Sente algum desconforto perto de símbolos religiosos",
        "A pessoa sente algum desconforto perto de símbolos religiosos?",
    ),
    Question(
        "voice_shift",
        "A voz muda de um jeito estranho, sem explicação",
        "A voz da pessoa muda de um jeito estranho, sem explicação?",
    ),
    Question(
        "somnambulism",
        "Anda dormindo com frequência e conta coisas esquisitas depois",
        "A pessoa anda dormindo com frequência e conta coisas esquisitas depois?",
    ),
    Question(
        "mood_swings",
        "Muda de humor do nada, sem motivo claro",
        "A pessoa muda de humor do nada, sem motivo claro?",
    ),
    Question(
        "temperature_shift",
        "A temperatura do corpo altera sem explicação",
        "A temperatura do corpo da pessoa altera sem explicação?",
    ),
    Question(
        "object_movement",
        "Objetos próximos se mexem sozinhos, ou há lapsos de raiva com arremesso de materiais",
        "Os objetos perto da pessoa se mexem sozinhos, ou ela tem lapsos de raiva arremessando materiais?",
    ),
    Question(
        "memory_gaps",
        "Tem apagões ou esquece o que fez durante comportamentos estranhos",
        "A pessoa tem apagões ou esquece o que fez durante comportamentos estranhos?",
    ),
    Question(
        "shadow_presence",
        "Alguém já comentou ter visto sombras ou vultos por perto",
        "Alguém já disse que viu sombras ou vultos perto da pessoa?",
    ),
    Question(
        "mirror_discomfort",
        "Evita se olhar no espelho ou sente incômodo com o próprio reflexo",
        "A pessoa evita se olhar no espelho ou parece incomodada com o próprio reflexo?",
    ),
    Question(
        "unusual_strength",
        "Já demonstrou força fora do comum em alguns momentos",
        "A pessoa já mostrou uma força fora do comum em alguns momentos?",
    ),
    Question(
        "animal_reaction",
        "Animais ficam agitados, agressivos ou desconfortáveis quando estão por perto",
        "Animais ficam agitados, agressivos ou desconfortáveis quando estão perto da pessoa?",
    ),
    Question(
        "time_distortion",
        "A percepção do tempo muda durante certos episódios",
        "A pessoa sente que o tempo passa diferente durante certos episódios?",
    ),
    Question(
        "persistent_whispers",
        "Ouve sussurros ou vozes mesmo quando não há ninguém por perto",
        "A pessoa ouve sussurros ou vozes mesmo quando não tem ninguém por perto?",
    ),
    Question(
        "symbolic_drawings",
        "Faz desenhos ou símbolos repetidos sem saber o motivo",
        "A pessoa faz desenhos ou símbolos repetidos sem saber o porquê?",
    ),
    Question(
        "unexplained_fatigue",
        "Sente cansaço além do normal",
        "A pessoa sente cansaço além do normal?",
    ),
]

TRAIT_TAGS = [q.trait for q in QUESTION_BANK]


def random_questions(
    quantity: int = 7,
    rng: Optional[random.Random] = None
) -> List[Question]:
    """Shuffle the bank and keep the first `quantity` questions"""
    rng = rng or random.Random()
    questions = list(QUESTION_BANK)
    rng.shuffle(questions)
    return questions[:max(0, quantity)]
