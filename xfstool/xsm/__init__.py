"""Words, memory, registers and disk image of the XSM machine."""